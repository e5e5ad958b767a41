"""Payments app package.

This app contains the payment ledger and the adapter for the external
hosted-checkout payment processor. Payment rows are written when the
processor redirects a renter back after a successful checkout.
"""
