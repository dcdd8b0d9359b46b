"""Properties app package.

This app holds the hotel catalogue: business units (the group's hotel
properties) and the room types each of them sells, together with the
occupancy limits and rates used by the booking funnel.
"""
