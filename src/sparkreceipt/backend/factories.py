"""Factory functions for backend adapters, configured from the environment."""

import os
from pathlib import Path
from typing import Optional

from sparkreceipt.backend.functions import BackendFunctions, HTTPBackendFunctions
from sparkreceipt.backend.storage import BlobStorage, HTTPBlobStorage, LocalBlobStorage


def create_backend_functions(
    base_url: Optional[str] = None, api_key: Optional[str] = None
) -> Optional[BackendFunctions]:
    """Create the remote functions client.

    Args:
        base_url: Backend URL. If None, checks SPARKRECEIPT_BACKEND_URL.
        api_key: API key. If None, checks SPARKRECEIPT_API_KEY.

    Returns:
        HTTPBackendFunctions, or None when no backend URL is configured
    """
    base_url = base_url or os.environ.get("SPARKRECEIPT_BACKEND_URL")
    if not base_url:
        return None
    api_key = api_key or os.environ.get("SPARKRECEIPT_API_KEY", "")
    return HTTPBackendFunctions(base_url, api_key)


def create_blob_storage(
    base_url: Optional[str] = None,
    api_key: Optional[str] = None,
    storage_dir: Optional[str] = None,
) -> BlobStorage:
    """Create blob storage.

    Uses the hosted backend when a backend URL is configured, otherwise a
    local directory (SPARKRECEIPT_STORAGE_DIR, then ~/.sparkreceipt/storage).
    """
    base_url = base_url or os.environ.get("SPARKRECEIPT_BACKEND_URL")
    if base_url:
        api_key = api_key or os.environ.get("SPARKRECEIPT_API_KEY", "")
        return HTTPBlobStorage(base_url, api_key)

    storage_dir = storage_dir or os.environ.get("SPARKRECEIPT_STORAGE_DIR")
    if storage_dir is None:
        storage_dir = str(Path.home() / ".sparkreceipt" / "storage")
    return LocalBlobStorage(storage_dir)
