"""Bookings app package.

This app encapsulates the booking admission and lifecycle engine: the
capacity ledger that admits bookings against a travel package's fixed
participant capacity, the booking and payment state machines, booking
references and the read-side lookups. Admission is serialized per package
with row locks (or an in-process lock on backends without them) and runs in
one transaction with the booking insert.
"""
