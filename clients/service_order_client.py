"""
HTTP client for the service order persistence API.

The API is a plain document store behind REST: PUT merges whatever fields
it receives into the stored order. It does not derive timestamps or
totals, and it has no version check, so the last write wins.

Every failure (connection error, non-2xx status, undecodable body) is
raised as PersistenceError. Nothing is retried here.
"""

import json
import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


class PersistenceError(Exception):
    """The persistence API did not accept or answer a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ServiceOrderClient:
    """Thin wrapper over the /service-orders REST resource."""

    def __init__(
        self,
        base_url: str,
        api_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        """
        Args:
            base_url: API root, e.g. "http://localhost:3000/api"
            api_token: Bearer token sent on every request, if set
            timeout: Per-request timeout in seconds
            session: Optional requests session (connection reuse, tests)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}
        if api_token:
            self.headers["Authorization"] = f"Bearer {api_token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/service-orders{path}"

    def _request(self, method: str, path: str = "", payload: dict | None = None,
                 params: dict | None = None) -> Any:
        url = self._url(path)
        try:
            response = self.session.request(
                method,
                url,
                data=json.dumps(payload) if payload is not None else None,
                params=params,
                headers=self.headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Persistence API connection failed: {method} {url}: {e}")
            raise PersistenceError(f"Connection failed: {e}")

        if response.status_code == 404:
            return None

        if not response.ok:
            logger.error(
                f"Persistence API error: {method} {url} -> {response.status_code} {response.text[:200]}"
            )
            raise PersistenceError(
                f"HTTP Error: {response.status_code} - {response.reason}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError:
            logger.error(f"Persistence API returned invalid JSON: {response.text[:200]}")
            raise PersistenceError("Invalid response from persistence API")

    def get(self, order_id: str) -> dict | None:
        """Fetch one order record. None if the API answers 404."""
        return self._request("GET", f"/{order_id}")

    def list_orders(self, params: dict | None = None) -> list[dict]:
        """
        List order records.

        Accepts either a bare JSON list or the paginated {"data": [...]} shape.
        """
        body = self._request("GET", params=params)
        if body is None:
            return []
        if isinstance(body, dict):
            return body.get("data", [])
        return body

    def create(self, payload: dict) -> dict:
        """Create an order. The API assigns _id and orderNumber."""
        return self._request("POST", payload=payload)

    def update(self, order_id: str, patch: dict) -> dict | None:
        """
        Merge patch into the stored order.

        Returns:
            The stored order after the merge, or None if it doesn't exist
        """
        return self._request("PUT", f"/{order_id}", payload=patch)

    def delete(self, order_id: str) -> bool:
        """Delete an order. False if it did not exist."""
        return self._request("DELETE", f"/{order_id}") is not None
