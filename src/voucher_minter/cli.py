"""Interactive command-line flow.

1. Collect the key, coupon name, expiration date and code count
2. List products and let the operator pick one
3. Create a 100%-off coupon restricted to that product
4. Mint single-use promotion codes into the output file
"""

import argparse
import asyncio
import sys
from typing import Callable, List, Optional

import httpx

from . import __version__
from .client import StripeClient
from .codes import code_factory
from .config import Settings, get_settings, validate_settings
from .errors import InputError, VoucherError
from .inputs import parse_code_count, parse_expiration, parse_selection, to_epoch
from .logging_utils import RunIdContext, get_logger, get_run_id, setup_logging
from .minter import PromotionCodeMinter
from .models import CouponRequest

logger = get_logger(__name__)

EXIT_INTERRUPTED = 130


def _ask(question: str, input_fn: Callable[[], str]) -> str:
    print(question)
    try:
        return input_fn()
    except EOFError:
        raise InputError("No input received. Aborting.")


async def run(
    settings: Settings,
    input_fn: Callable[[], str] = input,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """Run one interactive minting session.

    Args:
        settings: Runtime settings.
        input_fn: Reads one line of operator input.
        transport: Optional httpx transport handed to the Stripe client.

    Returns:
        Process exit code (0 on success).
    """
    print("[ Voucher Minter ]")
    mid_line = False

    try:
        api_key = settings.stripe_api_key or _ask("Enter your Stripe key:", input_fn).strip()
        coupon_name = _ask("Coupon name: ", input_fn).strip()
        expiration = parse_expiration(_ask("Expiration date (YYYY-MM-DD):", input_fn))
        count = parse_code_count(_ask("How many codes do you need:", input_fn))
        expires_at = to_epoch(expiration)
        logger.info(f"Requested {count} codes expiring at {expiration.isoformat()} ({expires_at})")

        async with StripeClient(
            api_key,
            base_url=settings.stripe_api_base,
            timeout=settings.http_timeout,
            transport=transport,
        ) as client:
            listing = await client.list_products()

            print("Select a product from list:")
            for index, product in enumerate(listing.data):
                print(f"[{index}] {product.name}")

            if not listing.data:
                raise InputError("No available products")

            try:
                selection = input_fn()
            except EOFError:
                raise InputError("No input received. Aborting.")
            product = listing.data[parse_selection(selection, len(listing.data))]
            logger.info(f"Selected product {product.id} ({product.name})")

            print("Creating a coupon...", end="", flush=True)
            mid_line = True
            coupon = await client.create_coupon(
                CouponRequest(
                    name=coupon_name,
                    percent_off=100.0,
                    redeem_by=expires_at,
                    products=[product.id],
                )
            )
            print("[ DONE ]")
            mid_line = False

            minter = PromotionCodeMinter(
                client,
                code_factory(settings.code_length, settings.code_alphabet),
                max_retries=settings.max_code_retries,
            )
            result = await minter.mint(
                coupon.id,
                expires_at,
                count,
                settings.output_path,
                first_time_transaction=settings.first_time_transaction,
            )

    except VoucherError as e:
        if mid_line:
            print()
        print(e.message)
        if e.partial is not None:
            print(f"Wrote {e.partial.created} of {e.partial.requested} codes to {settings.output_path}")
        logger.warning(f"Run {get_run_id()} aborted: {type(e).__name__} (exit {e.exit_code})")
        return e.exit_code
    except (KeyboardInterrupt, asyncio.CancelledError) as e:
        print()
        print("Interrupted.")
        partial = getattr(e, "partial", None)
        if partial is not None:
            print(f"Wrote {partial.created} of {partial.requested} codes to {settings.output_path}")
        logger.warning(f"Run {get_run_id()} interrupted (exit {EXIT_INTERRUPTED})")
        return EXIT_INTERRUPTED

    print(f"Wrote {result.created} codes to {settings.output_path}")
    return 0


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="voucher-minter",
        description="Create a 100%-off Stripe coupon and mint single-use promotion codes for it",
    )
    parser.add_argument("--output", help="File receiving the generated codes (default: vouchers.txt)")
    parser.add_argument("--max-retries", type=int, help="Rejected code attempts tolerated before aborting")
    parser.add_argument("--api-base", help="Stripe API base URL")
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"))
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point."""
    args = _parse_args(argv)

    try:
        settings = get_settings(
            output_path=args.output,
            max_code_retries=args.max_retries,
            stripe_api_base=args.api_base,
            log_level=args.log_level,
        )
        validate_settings(settings)
    except ValueError as e:
        print(e, file=sys.stderr)
        sys.exit(2)

    setup_logging(settings.log_level, settings.log_format)

    with RunIdContext() as run_id:
        logger.info(f"Starting run {run_id}")
        try:
            exit_code = asyncio.run(run(settings))
        except KeyboardInterrupt:
            # Only reached when the interrupt lands outside the running task
            print(f"\nInterrupted. Codes created so far are in {settings.output_path}")
            exit_code = EXIT_INTERRUPTED

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
