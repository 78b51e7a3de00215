"""Async Stripe API client."""

from typing import Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .errors import (
    CodeRejectedError,
    CouponRejectedError,
    UnauthorizedError,
    UnexpectedResponseError,
)
from .logging_utils import get_logger
from .models import Coupon, CouponRequest, ProductList, PromotionCode, PromotionCodeRequest

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

ModelT = TypeVar("ModelT", bound=BaseModel)


class StripeClient:
    """Thin wrapper over the three Stripe endpoints a minting run needs."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.stripe.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Stripe secret key, sent as a bearer token.
            base_url: Stripe REST base URL.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests to simulate Stripe).
        """
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
        )

    async def close(self):
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _send(self, method: str, path: str, form=None) -> httpx.Response:
        kwargs = {}
        if form is not None:
            kwargs["data"] = dict(form)
            kwargs["headers"] = {"Content-Type": FORM_CONTENT_TYPE}
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise UnexpectedResponseError() from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.status_code == 401:
            raise UnauthorizedError(status_code=401)
        return response

    def _unexpected(self, response: httpx.Response) -> UnexpectedResponseError:
        logger.error(f"Unexpected Stripe response: {response.status_code} - {response.text}")
        return UnexpectedResponseError(status_code=response.status_code)

    def _parse(self, response: httpx.Response, model: Type[ModelT]) -> ModelT:
        """Parse a 200 body, treating anything that is not the expected JSON as unexpected."""
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed {model.__name__} in Stripe response: {e}")
            raise UnexpectedResponseError(status_code=response.status_code) from e

    async def list_products(self) -> ProductList:
        """Fetch the first page of products.

        Raises:
            UnauthorizedError: On 401.
            UnexpectedResponseError: On any other non-200 status.
        """
        response = await self._send("GET", "/products")
        if response.status_code != 200:
            raise self._unexpected(response)

        products = self._parse(response, ProductList)
        if products.has_more:
            logger.warning(f"Stripe has more than {len(products.data)} products; only the first page is offered")
        return products

    async def create_coupon(self, request: CouponRequest) -> Coupon:
        """Create a coupon.

        Raises:
            UnauthorizedError: On 401.
            CouponRejectedError: On 400.
            UnexpectedResponseError: On any other non-200 status.
        """
        response = await self._send("POST", "/coupons", form=request.to_form())
        if response.status_code == 400:
            logger.error(f"Coupon rejected: {response.text}")
            raise CouponRejectedError(status_code=400)
        if response.status_code != 200:
            raise self._unexpected(response)

        coupon = self._parse(response, Coupon)
        logger.info(f"Created coupon {coupon.id} for products {request.products}")
        return coupon

    async def create_promotion_code(self, request: PromotionCodeRequest) -> PromotionCode:
        """Register a promotion code for a coupon.

        Raises:
            UnauthorizedError: On 401.
            CodeRejectedError: On 400 (recoverable).
            UnexpectedResponseError: On any other non-200 status, or a 200 whose body
                cannot be parsed (the code was accepted; ``status_code`` is 200).
        """
        response = await self._send("POST", "/promotion_codes", form=request.to_form())
        if response.status_code == 400:
            logger.info(f"Promotion code {request.code} rejected: {response.text}")
            raise CodeRejectedError(status_code=400)
        if response.status_code != 200:
            raise self._unexpected(response)

        return self._parse(response, PromotionCode)
