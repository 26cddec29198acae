"""
Blob storage client used by the walkthrough.
Currently supports Azure Blob Storage, plus an in-memory stand-in.
"""

import datetime
import logging
from typing import Any, Dict, Iterator, Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings, PublicAccess

from .naming import calculate_content_hash

# HTTP-header-like blob properties, in ContentSettings keyword order
HEADER_FIELDS = (
    "content_type",
    "content_encoding",
    "content_language",
    "content_disposition",
    "cache_control",
    "content_md5",
)

PUBLIC_ACCESS_LEVELS = ("container", "blob", "off")


def _resolve_public_access(level: Optional[str]) -> Optional[PublicAccess]:
    """Map a configured access level name to the SDK enum ("off" means private)."""
    if level is None:
        return None

    level = level.lower()
    if level not in PUBLIC_ACCESS_LEVELS:
        raise ValueError(
            f"Unknown public access level '{level}', "
            f"expected one of {', '.join(PUBLIC_ACCESS_LEVELS)}"
        )

    if level == "off":
        return None
    return PublicAccess(level)


def _check_headers(headers: Dict[str, Any]):
    unknown = set(headers) - set(HEADER_FIELDS)
    if unknown:
        raise ValueError(f"Unknown blob header(s): {', '.join(sorted(unknown))}")


class BlobStorageClient:
    """
    Thin wrapper over the Azure Blob Storage SDK.

    Every public method issues a single request against the service and
    returns plain Python values, so callers never touch SDK model types.
    """

    def __init__(self, connection_string: str):
        """
        Initialize blob storage client.

        Args:
            connection_string: Connection string for blob storage

        Raises:
            ValueError: If the connection string is empty or malformed
        """
        if not connection_string:
            raise ValueError(
                "A storage connection string is required "
                "(--connection-string or AZURE_STORAGE_CONNECTION_STRING)"
            )

        self.logger = logging.getLogger(__name__)
        self.blob_service_client = BlobServiceClient.from_connection_string(
            connection_string
        )

    def _blob_client(self, container_name: str, blob_name: str):
        return self.blob_service_client.get_blob_client(
            container=container_name, blob=blob_name
        )

    def ensure_container(
        self, container_name: str, public_access: Optional[str] = "container"
    ) -> bool:
        """
        Create a container if it does not exist yet.

        Args:
            container_name: Name of the container
            public_access: Anonymous access level ("container", "blob" or "off")

        Returns:
            True if the container was created, False if it already existed
        """
        access = _resolve_public_access(public_access)
        container_client = self.blob_service_client.get_container_client(
            container_name
        )

        try:
            container_client.create_container(public_access=access)
        except ResourceExistsError:
            self.logger.info(f"Container '{container_name}' already exists")
            return False

        self.logger.info(f"Created container '{container_name}'")
        return True

    def upload_blob(
        self,
        container_name: str,
        blob_name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """
        Upload bytes as a block blob, overwriting any existing blob.

        Args:
            container_name: Target container
            blob_name: Name of the blob
            data: Payload to upload
            content_type: MIME type stored with the blob

        Returns:
            The blob name
        """
        blob_client = self._blob_client(container_name, blob_name)

        try:
            blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except Exception as e:
            self.logger.error(
                f"Failed to upload {blob_name} to {container_name}: {str(e)}"
            )
            raise

        self.logger.info(f"Uploaded {len(data)} bytes to {container_name}/{blob_name}")
        return blob_name

    def list_containers(self) -> Iterator[str]:
        """Yield the names of all containers in the account."""
        for container in self.blob_service_client.list_containers():
            yield container.name

    def list_blobs(self, container_name: str) -> Iterator[str]:
        """Yield the names of all blobs in a container."""
        container_client = self.blob_service_client.get_container_client(
            container_name
        )
        for blob in container_client.list_blobs():
            yield blob.name

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        """
        Check if a blob exists in storage.

        Args:
            container_name: Container holding the blob
            blob_name: Name of the blob

        Returns:
            True if blob exists, False otherwise
        """
        return self._blob_client(container_name, blob_name).exists()

    def get_blob_url(self, container_name: str, blob_name: str) -> str:
        """Get the full URL of a blob."""
        return self._blob_client(container_name, blob_name).url

    def download_blob(self, container_name: str, blob_name: str) -> bytes:
        """
        Download the full content of a blob.

        Raises:
            ResourceNotFoundError: If the blob does not exist
        """
        blob_client = self._blob_client(container_name, blob_name)

        try:
            data = blob_client.download_blob().readall()
        except Exception as e:
            self.logger.error(
                f"Failed to download {container_name}/{blob_name}: {str(e)}"
            )
            raise

        self.logger.info(f"Downloaded {len(data)} bytes from {container_name}/{blob_name}")
        return data

    def download_to_file(
        self, container_name: str, blob_name: str, local_file_path: str
    ) -> str:
        """
        Download a blob and write it to a local file, replacing its content.

        Returns:
            The local file path
        """
        data = self.download_blob(container_name, blob_name)
        with open(local_file_path, "wb") as f:
            f.write(data)
        return local_file_path

    def delete_blob(self, container_name: str, blob_name: str) -> bool:
        """
        Delete a blob if it exists.

        Returns:
            True if deleted, False if it didn't exist
        """
        try:
            self._blob_client(container_name, blob_name).delete_blob()
        except ResourceNotFoundError:
            self.logger.info(f"Blob {container_name}/{blob_name} not found, nothing to delete")
            return False

        self.logger.info(f"Deleted blob {container_name}/{blob_name}")
        return True

    def delete_container(self, container_name: str) -> bool:
        """
        Delete a container if it exists.

        Returns:
            True if deleted, False if it didn't exist
        """
        container_client = self.blob_service_client.get_container_client(
            container_name
        )

        try:
            container_client.delete_container()
        except ResourceNotFoundError:
            self.logger.info(f"Container '{container_name}' not found, nothing to delete")
            return False

        self.logger.info(f"Deleted container '{container_name}'")
        return True

    def get_properties(self, container_name: str, blob_name: str) -> Dict[str, Any]:
        """
        Read the system properties, HTTP headers and metadata of a blob.

        Returns:
            Property record with one key per header in HEADER_FIELDS plus
            blob_type, creation_time, last_modified and metadata
        """
        properties = self._blob_client(container_name, blob_name).get_blob_properties()
        content_settings = properties.content_settings

        record = {field: getattr(content_settings, field) for field in HEADER_FIELDS}
        blob_type = properties.blob_type
        record.update(
            {
                "blob_type": getattr(blob_type, "value", blob_type),
                "creation_time": properties.creation_time,
                "last_modified": properties.last_modified,
                "metadata": dict(properties.metadata or {}),
            }
        )
        return record

    def set_properties(
        self, container_name: str, blob_name: str, headers: Dict[str, Any]
    ):
        """
        Replace the HTTP headers of a blob.

        The service overwrites the full header set: any header missing from
        `headers` is cleared on the blob.

        Raises:
            ValueError: If `headers` contains keys outside HEADER_FIELDS
        """
        _check_headers(headers)
        content_settings = ContentSettings(
            **{field: headers.get(field) for field in HEADER_FIELDS}
        )
        self._blob_client(container_name, blob_name).set_http_headers(
            content_settings=content_settings
        )
        self.logger.info(f"Set HTTP headers on {container_name}/{blob_name}")

    def get_metadata(self, container_name: str, blob_name: str) -> Dict[str, str]:
        """Read the user-defined metadata of a blob."""
        properties = self._blob_client(container_name, blob_name).get_blob_properties()
        return dict(properties.metadata or {})

    def set_metadata(
        self, container_name: str, blob_name: str, metadata: Dict[str, str]
    ):
        """Replace the user-defined metadata of a blob with `metadata`."""
        self._blob_client(container_name, blob_name).set_blob_metadata(
            metadata=dict(metadata)
        )
        self.logger.info(
            f"Set {len(metadata)} metadata item(s) on {container_name}/{blob_name}"
        )


class MockBlobStorageClient:
    """
    In-memory implementation for testing and offline runs without actual
    blob storage. Raises the same azure.core exceptions as the service.
    """

    account_url = "https://mockstorage.blob.core.windows.net"

    def __init__(self):
        self.containers: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.container_access: Dict[str, Optional[str]] = {}
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _now() -> datetime.datetime:
        return datetime.datetime.now(datetime.timezone.utc)

    def _container(self, container_name: str) -> Dict[str, Dict[str, Any]]:
        if container_name not in self.containers:
            raise ResourceNotFoundError(
                f"The specified container does not exist: {container_name}"
            )
        return self.containers[container_name]

    def _blob(self, container_name: str, blob_name: str) -> Dict[str, Any]:
        blobs = self._container(container_name)
        if blob_name not in blobs:
            raise ResourceNotFoundError(
                f"The specified blob does not exist: {container_name}/{blob_name}"
            )
        return blobs[blob_name]

    def ensure_container(
        self, container_name: str, public_access: Optional[str] = "container"
    ) -> bool:
        """Mock container creation that keeps existing containers untouched."""
        access = _resolve_public_access(public_access)

        if container_name in self.containers:
            self.logger.info(f"[MOCK] Container '{container_name}' already exists")
            return False

        self.containers[container_name] = {}
        self.container_access[container_name] = access.value if access else None
        self.logger.info(f"[MOCK] Created container '{container_name}'")
        return True

    def upload_blob(
        self,
        container_name: str,
        blob_name: str,
        data: bytes,
        content_type: str = "application/octet-stream",
    ) -> str:
        """Mock upload that stores the payload and resets headers and metadata."""
        blobs = self._container(container_name)
        now = self._now()
        previous = blobs.get(blob_name)

        headers = {field: None for field in HEADER_FIELDS}
        headers["content_type"] = content_type
        headers["content_md5"] = calculate_content_hash(data)

        blobs[blob_name] = {
            "data": bytes(data),
            "headers": headers,
            "metadata": {},
            "blob_type": "BlockBlob",
            "creation_time": previous["creation_time"] if previous else now,
            "last_modified": now,
        }
        self.logger.info(f"[MOCK] Uploaded {len(data)} bytes to {container_name}/{blob_name}")
        return blob_name

    def list_containers(self) -> Iterator[str]:
        """Yield container names in name order, as the service does."""
        for container_name in sorted(self.containers):
            yield container_name

    def list_blobs(self, container_name: str) -> Iterator[str]:
        """Yield blob names of a container in name order."""
        for blob_name in sorted(self._container(container_name)):
            yield blob_name

    def blob_exists(self, container_name: str, blob_name: str) -> bool:
        return blob_name in self.containers.get(container_name, {})

    def download_blob(self, container_name: str, blob_name: str) -> bytes:
        return self._blob(container_name, blob_name)["data"]

    def download_to_file(
        self, container_name: str, blob_name: str, local_file_path: str
    ) -> str:
        data = self.download_blob(container_name, blob_name)
        with open(local_file_path, "wb") as f:
            f.write(data)
        return local_file_path

    def delete_blob(self, container_name: str, blob_name: str) -> bool:
        blobs = self.containers.get(container_name, {})
        if blob_name not in blobs:
            return False

        del blobs[blob_name]
        self.logger.info(f"[MOCK] Deleted blob {container_name}/{blob_name}")
        return True

    def delete_container(self, container_name: str) -> bool:
        if container_name not in self.containers:
            return False

        del self.containers[container_name]
        self.container_access.pop(container_name, None)
        self.logger.info(f"[MOCK] Deleted container '{container_name}'")
        return True

    def get_properties(self, container_name: str, blob_name: str) -> Dict[str, Any]:
        blob = self._blob(container_name, blob_name)

        record = dict(blob["headers"])
        record.update(
            {
                "blob_type": blob["blob_type"],
                "creation_time": blob["creation_time"],
                "last_modified": blob["last_modified"],
                "metadata": dict(blob["metadata"]),
            }
        )
        return record

    def set_properties(
        self, container_name: str, blob_name: str, headers: Dict[str, Any]
    ):
        _check_headers(headers)
        blob = self._blob(container_name, blob_name)
        blob["headers"] = {field: headers.get(field) for field in HEADER_FIELDS}
        blob["last_modified"] = self._now()

    def get_metadata(self, container_name: str, blob_name: str) -> Dict[str, str]:
        return dict(self._blob(container_name, blob_name)["metadata"])

    def set_metadata(
        self, container_name: str, blob_name: str, metadata: Dict[str, str]
    ):
        blob = self._blob(container_name, blob_name)
        blob["metadata"] = dict(metadata)
        blob["last_modified"] = self._now()

    def get_blob_url(self, container_name: str, blob_name: str) -> str:
        """Mock blob URL generation."""
        return f"{self.account_url}/{container_name}/{blob_name}"
