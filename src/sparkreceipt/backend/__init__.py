"""Adapters for the hosted backend: remote functions and blob storage."""

from sparkreceipt.backend.functions import BackendFunctions, HTTPBackendFunctions
from sparkreceipt.backend.storage import BlobStorage, HTTPBlobStorage, LocalBlobStorage
from sparkreceipt.backend.factories import create_backend_functions, create_blob_storage

__all__ = [
    "BackendFunctions",
    "HTTPBackendFunctions",
    "BlobStorage",
    "HTTPBlobStorage",
    "LocalBlobStorage",
    "create_backend_functions",
    "create_blob_storage",
]
