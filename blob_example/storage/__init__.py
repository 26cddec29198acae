"""
Storage package wrapping the blob storage SDK.
"""

from .blob_client import HEADER_FIELDS, BlobStorageClient, MockBlobStorageClient
from .naming import calculate_content_hash, generate_blob_name

__all__ = [
    "HEADER_FIELDS",
    "calculate_content_hash",
    "generate_blob_name",
    "BlobStorageClient",
    "MockBlobStorageClient",
]
