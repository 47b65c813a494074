"""Remote functions hosted by the backend (receipt extraction, reports)."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

import requests

from sparkreceipt.domain.errors import BackendError

logger = logging.getLogger(__name__)

EXTRACT_RECEIPT = "extract-receipt"
GENERATE_REPORT = "generate-report"


class BackendFunctions(ABC):
    """Abstract interface to the hosted remote functions."""

    @abstractmethod
    def invoke(self, name: str, body: Mapping[str, Any]) -> Any:
        """Invoke a remote function and return its decoded response.

        Raises:
            BackendError: If the call fails or is rejected
        """
        pass

    def extract_receipt(self, image_base64: str) -> dict[str, Any]:
        """Extract receipt fields from a base64-encoded image.

        Returns:
            The ``data`` object of a successful extraction

        Raises:
            BackendError: If the call fails or the backend reports no success
        """
        response = self.invoke(EXTRACT_RECEIPT, {"imageBase64": image_base64})
        if not isinstance(response, Mapping):
            raise BackendError(f"Unexpected {EXTRACT_RECEIPT} response: {response!r}")
        if not response.get("success"):
            raise BackendError(response.get("error") or "Failed to extract receipt data")
        data = response.get("data")
        if not isinstance(data, Mapping):
            raise BackendError(f"{EXTRACT_RECEIPT} returned no data")
        return dict(data)

    def generate_report(self, body: Mapping[str, Any]) -> Any:
        """Generate a report file (CSV text or a JSON document)."""
        return self.invoke(GENERATE_REPORT, body)


class HTTPBackendFunctions(BackendFunctions):
    """Remote functions reached over HTTP with requests."""

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 60.0):
        """Initialize HTTP remote functions.

        Args:
            base_url: Backend base URL, e.g. https://project.example.co
            api_key: API key sent as bearer token and ``apikey`` header
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def function_url(self, name: str) -> str:
        return f"{self.base_url}/functions/v1/{name}"

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        return headers

    def invoke(self, name: str, body: Mapping[str, Any]) -> Any:
        url = self.function_url(name)
        logger.debug("Invoking remote function %s at %s", name, url)
        try:
            response = requests.post(url, json=dict(body), headers=self._headers(), timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            detail = e.response.text[:200] if e.response is not None else str(e)
            logger.error("Remote function %s failed with HTTP %s: %s", name, status, detail)
            raise BackendError(f"{name} failed with HTTP {status}: {detail}") from e
        except requests.RequestException as e:
            logger.error("Remote function %s could not be reached: %s", name, e)
            raise BackendError(f"{name} could not be reached: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if "json" in content_type:
            try:
                return response.json()
            except ValueError as e:
                raise BackendError(f"{name} returned invalid JSON: {e}") from e
        return response.text
