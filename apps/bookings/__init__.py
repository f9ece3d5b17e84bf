"""Bookings app package.

This app encapsulates the booking domain: the booking model, pricing, the
atomic slot reservation store and the workflow that ties reservation,
persistence, cache invalidation and change notifications together. Slot
counts are only ever decremented with a conditional UPDATE, so concurrent
requests cannot oversell a campaign.
"""
