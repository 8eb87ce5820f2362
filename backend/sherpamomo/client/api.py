from typing import Any, Dict, Optional
import httpx
from sherpamomo.schemas.order import OrderCreate


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    """Customer-side client for the storefront and mobile app flows.

    Wraps any ``httpx.Client`` (a FastAPI ``TestClient`` works too); the
    session token from phone sign-in is kept and sent as a bearer header.
    """

    def __init__(self, http: httpx.Client, token: Optional[str] = None):
        self.http = http
        self.token = token

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, f"/api{path}", headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise ApiError(response.status_code, message)
        return response.json()

    # === Auth ===

    def request_code(self, phone: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/phone/request", json={"phone": phone})

    def verify_code(self, phone: str, code: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/phone/verify", json={"phone": phone, "code": code})
        self.token = data["token"]
        return data

    # === Orders ===

    def create_order(self, order: OrderCreate) -> Dict[str, Any]:
        return self._request(
            "POST", "/orders", json=order.model_dump(mode="json", by_alias=True, exclude_none=True)
        )

    def get_order(self, order_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/orders/{order_id}")

    def my_orders(self) -> Dict[str, Any]:
        return self._request("GET", "/orders/user/orders")

    def cancel_order(self, order_id: str) -> Dict[str, Any]:
        return self._request("PUT", f"/orders/{order_id}/cancel")

    # === Catalog ===

    def list_products(self, **params) -> Dict[str, Any]:
        return self._request("GET", "/products", params=params)
