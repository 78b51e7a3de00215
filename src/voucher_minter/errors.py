"""Exceptions raised during a minting run.

Each fatal error carries the console message shown to the operator and the
process exit code the CLI returns for it.
"""

from typing import Optional


class VoucherError(Exception):
    """Base class for all Voucher Minter errors."""

    exit_code = 1
    default_message = "Unexpected error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        self.status_code = status_code
        # Set by the minter when codes were written before the failure
        self.partial = None
        super().__init__(self.message)


class InputError(VoucherError):
    """Operator input could not be used."""

    exit_code = 2
    default_message = "Invalid input. Aborting."


class UnauthorizedError(VoucherError):
    """Stripe answered 401."""

    exit_code = 3
    default_message = "Unauthorized: Probably wrong stripe key"


class CouponRejectedError(VoucherError):
    """Stripe answered 400 to coupon creation."""

    exit_code = 4
    default_message = "Coupon cannot be created"


class CodeRejectedError(VoucherError):
    """Stripe answered 400 to promotion-code creation.

    Usually a code collision; the minter retries with a fresh code.
    """

    default_message = "Promotion code rejected"


class UnexpectedResponseError(VoucherError):
    """Any other non-200 status, or a transport failure."""

    exit_code = 5
    default_message = "Unexpected error"


class RetryLimitExceeded(VoucherError):
    exit_code = 6
    default_message = "Too many rejected promotion codes. Aborting."


class OutputFileError(VoucherError):
    exit_code = 7
    default_message = "Cannot open output file. Aborting."
