#!/usr/bin/env python3
"""
Blob Storage Walkthrough driver

Runs a fixed sequence of blob storage calls, one at a time, and prints the
outcome of each: upload, list, download, set/get properties, set/get
metadata, then delete the blob and its container.
"""

import logging
from typing import Any, Dict, List, Optional

from .config import ConfigurationManager
from .error_handler import ErrorHandler
from .storage import HEADER_FIELDS, BlobStorageClient, generate_blob_name

STEPS = [
    "upload_blob",
    "list_containers",
    "download_blob",
    "set_blob_properties",
    "get_blob_properties",
    "set_blob_metadata",
    "get_blob_metadata",
    "delete_blob",
    "delete_container",
]


class BlobWalkthrough:
    """
    Sequential driver for the blob storage walkthrough.

    The storage client can be injected; otherwise an Azure-backed client is
    built from the configured connection string.
    """

    def __init__(
        self,
        config: ConfigurationManager,
        client=None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        """Initialize the walkthrough"""
        self.config = config
        self.container_name = config.get("storage.container_name")

        # Setup logging
        self.logger = logging.getLogger(__name__)
        self._configure_logging()

        if client is None:
            client = BlobStorageClient(config.get_connection_string())
        self.client = client

        if error_handler is None:
            error_handler = ErrorHandler(config.get("error_handling", {}))
        self.error_handler = error_handler

        self.completed_steps: List[str] = []

    def _configure_logging(self):
        """Configure logging for the walkthrough"""
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler()],
        )

    def _run_step(self, step: str, func, *args):
        """Run one step, recording its outcome; failures are fatal."""
        try:
            result = func(*args)
        except Exception as e:
            self.logger.error(f"Step '{step}' failed: {str(e)}")
            self.error_handler.log_exception(step, e)
            raise

        self.completed_steps.append(step)
        self.error_handler.log_success(step)
        return result

    def run(self) -> Dict[str, Any]:
        """Main entry point: run every step in order"""
        self.completed_steps = []

        print("This is a sample application to demonstrate how to use Azure Blob")
        print("Uploading blob...")
        blob_name = self._run_step("upload_blob", self.upload_blob)
        print(f"Blob has been created : {blob_name}")

        print("Listing containers...")
        listing = self._run_step("list_containers", self.list_containers)

        local_file = self.config.get("output.local_file")
        print(f"Downloading blob {blob_name} to {local_file}...")
        downloaded = self._run_step("download_blob", self.download_blob, blob_name)

        print(f"Setting blob properties for {blob_name}...")
        self._run_step("set_blob_properties", self.set_blob_properties, blob_name)

        print(f"Getting blob properties for {blob_name}...")
        properties = self._run_step(
            "get_blob_properties", self.get_blob_properties, blob_name
        )

        print(f"Setting metadata for {blob_name}...")
        self._run_step("set_blob_metadata", self.set_blob_metadata, blob_name)

        print(f"Getting metadata for {blob_name}...")
        metadata = self._run_step(
            "get_blob_metadata", self.get_blob_metadata, blob_name
        )

        print(f"Deleting blob {blob_name}")
        blob_deleted = self._run_step("delete_blob", self.delete_blob, blob_name)

        print(f"Deleting container {self.container_name} ...")
        container_deleted = self._run_step("delete_container", self.delete_container)

        print("Finished...")

        return {
            "blob_name": blob_name,
            "container_name": self.container_name,
            "listing": listing,
            "local_file": downloaded,
            "properties": properties,
            "metadata": metadata,
            "blob_deleted": blob_deleted,
            "container_deleted": container_deleted,
            "completed_steps": list(self.completed_steps),
        }

    def upload_blob(self) -> str:
        """Create the container if needed and upload the sentence under a new name"""
        self.client.ensure_container(
            self.container_name, self.config.get("storage.public_access")
        )

        blob_name = generate_blob_name(self.config.get("blob.extension", ".txt"))
        sentence = self.config.get("blob.content")

        self.client.upload_blob(
            self.container_name,
            blob_name,
            sentence.encode("utf-8"),
            content_type=self.config.get("blob.content_type"),
        )
        self.logger.info(
            f"Blob URL: {self.client.get_blob_url(self.container_name, blob_name)}"
        )
        return blob_name

    def list_containers(self) -> Dict[str, List[str]]:
        """Print every container and the blobs it holds"""
        listing = {}
        for container_name in self.client.list_containers():
            print(f"\t{container_name}")

            listing[container_name] = []
            for blob_name in self.client.list_blobs(container_name):
                print(f"\t - {blob_name}")
                listing[container_name].append(blob_name)

        return listing

    def download_blob(self, blob_name: str) -> Optional[str]:
        """
        Download the blob to the configured local file.

        Returns:
            The local file path, or None if the blob no longer exists
        """
        local_file = self.config.get("output.local_file")

        if not self.client.blob_exists(self.container_name, blob_name):
            self.error_handler.log_skip("download_blob", f"{blob_name} does not exist")
            return None

        return self.client.download_to_file(self.container_name, blob_name, local_file)

    def set_blob_properties(self, blob_name: str):
        """
        Change the content language of the blob.

        The header set is written as a whole, so the current headers are read
        first and copied over with only the language replaced.
        """
        properties = self.client.get_properties(self.container_name, blob_name)

        headers = {field: properties[field] for field in HEADER_FIELDS}
        headers["content_language"] = self.config.get("blob.content_language")

        self.client.set_properties(self.container_name, blob_name, headers)

    def get_blob_properties(self, blob_name: str) -> Dict[str, Any]:
        """Print a selection of the blob's properties"""
        properties = self.client.get_properties(self.container_name, blob_name)

        print(f"\t- ContentLanguage: {properties['content_language']}")
        print(f"\t- ContentType: {properties['content_type']}")
        print(f"\t- Blob type: {properties['blob_type']}")
        print(f"\t- CreatedOn: {properties['creation_time']}")
        print(f"\t- LastModified: {properties['last_modified']}")

        return properties

    def set_blob_metadata(self, blob_name: str):
        """Replace the blob's metadata with the configured map"""
        metadata = self.config.get("blob.metadata", {})
        self.client.set_metadata(self.container_name, blob_name, metadata)

    def get_blob_metadata(self, blob_name: str) -> Dict[str, str]:
        """Print each metadata item of the blob"""
        metadata = self.client.get_metadata(self.container_name, blob_name)

        for key, value in metadata.items():
            print(f"\t{key} : {value}")

        return metadata

    def delete_blob(self, blob_name: str) -> bool:
        if not self.config.get("cleanup.delete_blob", True):
            self.error_handler.log_skip("delete_blob", "cleanup disabled")
            print(f"\tKeeping blob {blob_name}")
            return False

        return self.client.delete_blob(self.container_name, blob_name)

    def delete_container(self) -> bool:
        if not self.config.get("cleanup.delete_container", True):
            self.error_handler.log_skip("delete_container", "cleanup disabled")
            print(f"\tKeeping container {self.container_name}")
            return False

        return self.client.delete_container(self.container_name)
