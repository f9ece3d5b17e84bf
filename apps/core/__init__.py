"""Cross-cutting HTTP plumbing: health check, request ids, error envelopes."""
