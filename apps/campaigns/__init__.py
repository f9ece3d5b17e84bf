"""Campaigns app package.

This app owns the bookable advertising campaigns: the campaign model and its
derived availability label, the process-local read cache for campaign
listings, and the real-time change stream.
"""
