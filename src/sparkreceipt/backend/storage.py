"""Blob storage for receipt images."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import requests

from sparkreceipt.domain.errors import BackendError

logger = logging.getLogger(__name__)

RECEIPTS_BUCKET = "receipts"


class BlobStorage(ABC):
    """Abstract blob store: upload bytes, get back a public URL."""

    @abstractmethod
    def upload(
        self, bucket: str, name: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        """Store ``data`` under ``bucket/name`` and return its public URL.

        Raises:
            BackendError: If the upload fails
        """
        pass


class LocalBlobStorage(BlobStorage):
    """Blob storage in a local directory; URLs are file:// URIs."""

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser()

    def upload(
        self, bucket: str, name: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        target = self.root / bucket / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise BackendError(f"Could not store {bucket}/{name}: {e}") from e
        logger.debug("Stored %d bytes at %s", len(data), target)
        return target.resolve().as_uri()


class HTTPBlobStorage(BlobStorage):
    """Blob storage on the hosted backend, reached with requests."""

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 60.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def public_url(self, bucket: str, name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{name}"

    def upload(
        self, bucket: str, name: str, data: bytes, content_type: Optional[str] = None
    ) -> str:
        url = f"{self.base_url}/storage/v1/object/{bucket}/{name}"
        headers = {"Content-Type": content_type or "application/octet-stream"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
            headers["apikey"] = self.api_key
        try:
            response = requests.post(url, data=data, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Upload of %s/%s failed: %s", bucket, name, e)
            raise BackendError(f"Upload of {bucket}/{name} failed: {e}") from e
        return self.public_url(bucket, name)
