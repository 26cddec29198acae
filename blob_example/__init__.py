#!/usr/bin/env python3
"""
Blob Storage Walkthrough Package
"""

from .config import ConfigurationManager
from .driver import BlobWalkthrough
from .error_handler import ErrorHandler
from .storage import BlobStorageClient, MockBlobStorageClient

__version__ = "0.1.0"
__author__ = "Blob Storage Walkthrough"
__license__ = "MIT"

# Export main classes
__all__ = [
    "BlobWalkthrough",
    "ConfigurationManager",
    "ErrorHandler",
    "BlobStorageClient",
    "MockBlobStorageClient",
]
