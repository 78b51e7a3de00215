"""Promotion-code minting loop."""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .client import StripeClient
from .errors import (
    CodeRejectedError,
    OutputFileError,
    RetryLimitExceeded,
    UnexpectedResponseError,
    VoucherError,
)
from .logging_utils import get_logger
from .models import PromotionCodeRequest

logger = get_logger(__name__)


@dataclass
class MintResult:
    """Outcome of a minting run."""

    requested: int
    codes: List[str] = field(default_factory=list)
    attempts: int = 0
    rejected: int = 0

    @property
    def created(self) -> int:
        return len(self.codes)


class PromotionCodeMinter:
    """Creates single-use promotion codes until the requested count is reached."""

    def __init__(
        self,
        client: StripeClient,
        code_factory: Callable[[], str],
        max_retries: Optional[int] = None,
        echo: Callable[[str], None] = print,
    ):
        self.client = client
        self.code_factory = code_factory
        self.max_retries = max_retries
        self.echo = echo

    async def mint(
        self,
        coupon_id: str,
        expires_at: int,
        count: int,
        output_path: str,
        first_time_transaction: bool = False,
    ) -> MintResult:
        """Mint ``count`` promotion codes for ``coupon_id``.

        The output file is truncated before the first request and every
        accepted code is written and flushed immediately, so codes created
        before a fatal error remain on disk. Every exception leaving the
        loop, interrupts included, carries the progress so far as
        ``partial``.

        Raises:
            OutputFileError: If the output file cannot be opened.
            RetryLimitExceeded: If more than ``max_retries`` attempts were rejected.
            UnauthorizedError, UnexpectedResponseError: Propagated from the client.
        """
        result = MintResult(requested=count)

        try:
            output = open(output_path, "w", encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot open {output_path}: {e}")
            raise OutputFileError() from e

        with output:
            while result.created < count:
                request = PromotionCodeRequest(
                    coupon=coupon_id,
                    code=self.code_factory(),
                    expires_at=expires_at,
                    max_redemptions=1,
                    first_time_transaction=first_time_transaction,
                )
                result.attempts += 1

                try:
                    await self.client.create_promotion_code(request)
                except CodeRejectedError:
                    result.rejected += 1
                    if self.max_retries is not None and result.rejected > self.max_retries:
                        error = RetryLimitExceeded()
                        error.partial = result
                        raise error
                    continue
                except UnexpectedResponseError as e:
                    if e.status_code == 200:
                        # Stripe created the code even though the body was unreadable
                        self._record(result, output, request.code)
                    e.partial = result
                    raise
                except VoucherError as e:
                    e.partial = result
                    raise
                except (asyncio.CancelledError, KeyboardInterrupt) as e:
                    e.partial = result
                    raise

                self._record(result, output, request.code)

        logger.info(
            f"Minted {result.created} codes for coupon {coupon_id} "
            f"in {result.attempts} attempts ({result.rejected} rejected)"
        )
        return result

    def _record(self, result: MintResult, output, code: str) -> None:
        result.codes.append(code)
        output.write(f"{code}\n")
        output.flush()
        self.echo(f"Promotion code {result.created} or {result.requested} [{code}]")
