#!/usr/bin/env python3
"""
Tests for the Azure-backed storage client against a mocked SDK.
"""

import datetime
import os
import sys
import tempfile
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobType, ContentSettings, PublicAccess

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from blob_example.config import ConfigurationManager
from blob_example.driver import BlobWalkthrough
from blob_example.error_handler import ErrorHandler
from blob_example.storage import blob_client
from blob_example.storage.blob_client import BlobStorageClient


@pytest.fixture
def service(monkeypatch):
    """Replace the SDK service client with a MagicMock"""
    service = MagicMock()
    sdk = MagicMock()
    sdk.from_connection_string.return_value = service
    monkeypatch.setattr(blob_client, "BlobServiceClient", sdk)
    return service


def _properties(**headers):
    return SimpleNamespace(
        content_settings=ContentSettings(**headers),
        blob_type=BlobType.BLOCKBLOB,
        creation_time=datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc),
        last_modified=datetime.datetime(2024, 1, 2, tzinfo=datetime.timezone.utc),
        metadata={"author": "anonymous"},
    )


def test_requires_connection_string():
    """An empty connection string is rejected before touching the SDK"""
    with pytest.raises(ValueError):
        BlobStorageClient("")


def test_ensure_container(service):
    """Container creation passes the access level and tolerates conflicts"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    container_client = service.get_container_client.return_value

    assert client.ensure_container("sentences", "container") is True
    container_client.create_container.assert_called_once_with(
        public_access=PublicAccess.CONTAINER
    )

    container_client.create_container.side_effect = ResourceExistsError("exists")
    assert client.ensure_container("sentences", "off") is False
    assert container_client.create_container.call_args.kwargs["public_access"] is None


def test_upload_blob(service):
    """Upload overwrites and sets the content type"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    sdk_blob = service.get_blob_client.return_value

    assert client.upload_blob("sentences", "a.txt", b"data", "text/plain") == "a.txt"

    service.get_blob_client.assert_called_with(container="sentences", blob="a.txt")
    args, kwargs = sdk_blob.upload_blob.call_args
    assert args == (b"data",)
    assert kwargs["overwrite"] is True
    assert kwargs["content_settings"].content_type == "text/plain"


def test_upload_failure_propagates(service):
    """Service errors are logged and re-raised"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    service.get_blob_client.return_value.upload_blob.side_effect = ResourceNotFoundError(
        "container gone"
    )

    with pytest.raises(ResourceNotFoundError):
        client.upload_blob("sentences", "a.txt", b"data")


def test_listing_is_lazy(service):
    """Listing yields names and queries the service only when iterated"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    service.list_containers.return_value = [
        SimpleNamespace(name="logs"),
        SimpleNamespace(name="sentences"),
    ]
    service.get_container_client.return_value.list_blobs.return_value = [
        SimpleNamespace(name="a.txt")
    ]

    containers = client.list_containers()
    service.list_containers.assert_not_called()

    assert list(containers) == ["logs", "sentences"]
    assert list(client.list_blobs("sentences")) == ["a.txt"]
    service.get_container_client.assert_called_with("sentences")


def test_download_to_file(service):
    """Downloaded bytes replace the local file content"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    downloader = service.get_blob_client.return_value.download_blob.return_value
    downloader.readall.return_value = b"short"

    with tempfile.TemporaryDirectory() as temp_dir:
        local_file = os.path.join(temp_dir, "sentence.txt")
        with open(local_file, "wb") as f:
            f.write(b"a much longer previous content")

        client.download_to_file("sentences", "a.txt", local_file)

        with open(local_file, "rb") as f:
            assert f.read() == b"short"


def test_deletes_are_idempotent(service):
    """Not-found on delete is reported as False instead of raising"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    sdk_blob = service.get_blob_client.return_value
    container_client = service.get_container_client.return_value

    assert client.delete_blob("sentences", "a.txt") is True
    assert client.delete_container("sentences") is True

    sdk_blob.delete_blob.side_effect = ResourceNotFoundError("missing")
    container_client.delete_container.side_effect = ResourceNotFoundError("missing")

    assert client.delete_blob("sentences", "a.txt") is False
    assert client.delete_container("sentences") is False


def test_get_properties(service):
    """SDK properties are flattened into a plain record"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    service.get_blob_client.return_value.get_blob_properties.return_value = _properties(
        content_type="text/plain", cache_control="no-cache"
    )

    record = client.get_properties("sentences", "a.txt")

    assert record["content_type"] == "text/plain"
    assert record["cache_control"] == "no-cache"
    assert record["content_language"] is None
    assert record["blob_type"] == "BlockBlob"
    assert record["last_modified"].day == 2
    assert record["metadata"] == {"author": "anonymous"}
    assert client.get_metadata("sentences", "a.txt") == {"author": "anonymous"}


def test_set_properties_sends_full_header_set(service):
    """Every header is sent, unspecified ones as None"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    sdk_blob = service.get_blob_client.return_value

    client.set_properties(
        "sentences", "a.txt", {"content_type": "text/plain", "content_language": "en-us"}
    )

    settings = sdk_blob.set_http_headers.call_args.kwargs["content_settings"]
    assert settings.content_type == "text/plain"
    assert settings.content_language == "en-us"
    assert settings.cache_control is None

    with pytest.raises(ValueError):
        client.set_properties("sentences", "a.txt", {"content_lang": "en-us"})


def test_set_metadata(service):
    """Metadata is passed through as a plain dict"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    sdk_blob = service.get_blob_client.return_value

    client.set_metadata("sentences", "a.txt", {"author": "anonymous", "date": "unknown"})

    sdk_blob.set_blob_metadata.assert_called_once_with(
        metadata={"author": "anonymous", "date": "unknown"}
    )


def test_walkthrough_set_properties_keeps_headers(service):
    """The walkthrough copies the current headers and only changes the language"""
    client = BlobStorageClient("UseDevelopmentStorage=true")
    sdk_blob = service.get_blob_client.return_value
    sdk_blob.get_blob_properties.return_value = _properties(
        content_type="text/plain",
        content_md5=b"\x01\x02\x03",
        cache_control="no-cache",
    )

    with tempfile.TemporaryDirectory() as temp_dir:
        error_handler = ErrorHandler({"error_log": os.path.join(temp_dir, "errors.log")})
        walkthrough = BlobWalkthrough(
            ConfigurationManager(), client=client, error_handler=error_handler
        )

        walkthrough.set_blob_properties("a.txt")

    settings = sdk_blob.set_http_headers.call_args.kwargs["content_settings"]
    assert settings.content_language == "en-us"
    assert settings.content_type == "text/plain", "Content type must be copied"
    assert settings.content_md5 == b"\x01\x02\x03", "Content hash must be copied"
    assert settings.cache_control == "no-cache"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
