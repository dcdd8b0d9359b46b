"""Bookings app package.

Guests, reservations and the public booking funnel: server-side pricing,
reservation creation and the hand-off to the PayMongo checkout page.
"""
