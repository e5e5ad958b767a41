"""Rentals app package.

This app owns the rental ledger and the booking transaction: reserving
a car for a date range, opening a checkout session with the payment
processor, and reconciling the success or cancel redirect. The gateway
call runs between two short database transactions so that a failed
checkout never leaves a pending rental behind.
"""
