"""Analytics app package: read-only aggregates over campaigns and bookings."""
