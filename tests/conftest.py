from typing import Dict, List, Optional, Union
from urllib.parse import parse_qsl

import httpx
import pytest

from voucher_minter.config import Settings

PRODUCT = {
    "id": "prod_123",
    "object": "product",
    "active": True,
    "name": "Annual Plan",
    "description": None,
    "images": [],
    "livemode": False,
    "metadata": {},
    "created": 1700000000,
    "updated": 1700000000,
}

# A 200 whose body is not the JSON Stripe promises, e.g. from a misbehaving proxy
GARBLED = "garbled"
GARBLED_BODY = "<html>gateway</html>"

Scripted = Union[int, str, type]


class FakeStripe:
    """Scripted stand-in for the Stripe API.

    Status codes for promotion-code attempts are consumed from
    ``promotion_statuses`` in order; once exhausted every attempt succeeds.
    Any scripted status may also be ``GARBLED`` (200 with a non-JSON body) or
    an exception class, which is raised from the transport.
    """

    def __init__(
        self,
        products: Optional[List[dict]] = None,
        products_status: Scripted = 200,
        coupon_status: Scripted = 200,
        promotion_statuses: Optional[List[Scripted]] = None,
    ):
        self.products = [PRODUCT] if products is None else products
        self.products_status = products_status
        self.coupon_status = coupon_status
        self.promotion_statuses = list(promotion_statuses or [])
        self.requests: List[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def forms(self, path: str) -> List[Dict[str, str]]:
        return [
            dict(parse_qsl(r.content.decode()))
            for r in self.requests
            if r.url.path.endswith(path)
        ]

    def _scripted(self, status: Scripted) -> Optional[httpx.Response]:
        """Return the canned failure for ``status``, or None for a normal 200."""
        if isinstance(status, type) and issubclass(status, BaseException):
            raise status()
        if status == GARBLED:
            return httpx.Response(200, text=GARBLED_BODY)
        if status != 200:
            return httpx.Response(status, json={"error": {"message": "nope"}})
        return None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/products"):
            canned = self._scripted(self.products_status)
            if canned is not None:
                return canned
            return httpx.Response(
                200,
                json={"object": "list", "url": "/v1/products", "has_more": False, "data": self.products},
            )

        form = dict(parse_qsl(request.content.decode()))

        if path.endswith("/coupons"):
            canned = self._scripted(self.coupon_status)
            if canned is not None:
                return canned
            return httpx.Response(
                200,
                json={
                    "id": "coupon_abc",
                    "object": "coupon",
                    "percent_off": float(form["percent_off"]),
                    "redeem_by": int(form["redeem_by"]),
                    "valid": True,
                    "name": form.get("name"),
                    "duration": "once",
                    "times_redeemed": 0,
                },
            )

        if path.endswith("/promotion_codes"):
            status = self.promotion_statuses.pop(0) if self.promotion_statuses else 200
            canned = self._scripted(status)
            if canned is not None:
                return canned
            return httpx.Response(
                200,
                json={
                    "id": f"promo_{len(self.requests)}",
                    "object": "promotion_code",
                    "code": form["code"],
                    "active": True,
                    "max_redemptions": int(form["max_redemptions"]),
                    "expires_at": int(form["expires_at"]),
                },
            )

        return httpx.Response(404)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's Stripe settings out of the tests."""
    for name in ("STRIPE_API_KEY", "STRIPE_API_BASE", "OUTPUT_PATH", "MAX_CODE_RETRIES", "FIRST_TIME_TRANSACTION"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_stripe():
    return FakeStripe()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        stripe_api_key="",
        stripe_api_base="https://api.stripe.test/v1",
        output_path=str(tmp_path / "vouchers.txt"),
    )
