"""Voucher Minter - batch Stripe promotion codes for a single product."""

__version__ = "0.1.0"
