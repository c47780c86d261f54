from typing import Any, Dict, Iterable, List, Optional, Type

import requests

from apps.common import get_logger

from . import config
from .errors import (
    GENERIC_ORDER_FAILURE,
    CartRequestRejected,
    StorefrontError,
    TransientNetworkFailure,
    VendorSubmissionFailed,
)

logger = get_logger(__name__).bind(component="storefront", layer="transport")

_UNSET = object()


class CartApiClient:
    """HTTP client for the cart and order endpoints.

    Every method either returns the decoded JSON body or raises a
    ``StorefrontError`` subclass; ``requests`` exceptions never escape.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        *,
        timeout: Any = _UNSET,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or config.STOREFRONT_API_URL).rstrip("/")
        self.timeout = config.STOREFRONT_TIMEOUT if timeout is _UNSET else timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"

    def get_cart(self) -> List[Dict[str, Any]]:
        return self._call("GET", "/cart/")

    def add_item(self, product_id: int, quantity: int) -> Dict[str, Any]:
        return self._call("POST", f"/cart/items/{product_id}/", {"quantity": quantity})

    def set_quantity(self, product_id: int, quantity: int) -> Dict[str, Any]:
        return self._call("PUT", f"/cart/items/{product_id}/", {"quantity": quantity})

    def remove_item(self, product_id: int) -> Dict[str, Any]:
        return self._call("DELETE", f"/cart/items/{product_id}/")

    def clear(self) -> Dict[str, Any]:
        return self._call("DELETE", "/cart/")

    def confirm_order(
        self,
        vendor_id: int,
        delivery_mode: str,
        pickup_time: str,
        items: Iterable[Dict[str, int]],
    ) -> Dict[str, Any]:
        payload = {
            "vendorId": vendor_id,
            "deliveryMode": delivery_mode,
            "pickupTime": pickup_time,
            "items": list(items),
        }
        return self._call("POST", "/orders/", payload, rejected=VendorSubmissionFailed)

    def _call(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        *,
        rejected: Type[StorefrontError] = CartRequestRejected,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Request failed", method=method, url=url, error=str(exc))
            raise TransientNetworkFailure(f"Request to {path} failed: {exc}") from exc

        if 200 <= response.status_code < 300:
            try:
                return response.json()
            except ValueError as exc:
                raise TransientNetworkFailure(
                    "Server returned an unreadable response", status=response.status_code
                ) from exc

        error = _error_envelope(response)
        logger.info(
            "Request rejected",
            method=method,
            url=url,
            status=response.status_code,
            code=error.get("code"),
        )
        if rejected is VendorSubmissionFailed:
            raise VendorSubmissionFailed(
                error.get("message") or GENERIC_ORDER_FAILURE,
                status=response.status_code,
                code=error.get("code"),
                details=error.get("details"),
            )
        if 400 <= response.status_code < 500 and error.get("message"):
            raise rejected(
                error["message"],
                status=response.status_code,
                code=error.get("code"),
                details=error.get("details"),
            )
        raise TransientNetworkFailure(
            f"Unexpected response status {response.status_code}",
            status=response.status_code,
            code=error.get("code"),
        )


def _error_envelope(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return error
    # Bare {"message": "..."} answers are passed through as well
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return {"message": body["message"]}
    return {}
