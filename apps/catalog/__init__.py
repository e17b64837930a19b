"""Catalog app package.

Destinations and the dated travel packages sold for them. A package carries
the unit price and the maximum participant count the booking engine admits
against; the committed capacity itself is derived from bookings.
"""
