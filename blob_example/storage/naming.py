"""
Naming and hashing helpers for blobs created by the walkthrough.
"""

import hashlib
import uuid


def generate_blob_name(extension: str = ".txt") -> str:
    """
    Generate a unique blob name from a random UUID.

    Args:
        extension: File extension to append, with or without the leading dot

    Returns:
        Blob name like "3f2b8c1e-5d4a-4e6f-9a7b-0c1d2e3f4a5b.txt"
    """
    name = str(uuid.uuid4())

    if not extension:
        return name

    if not extension.startswith("."):
        extension = f".{extension}"

    return f"{name}{extension.lower()}"


def calculate_content_hash(data: bytes, hash_algorithm: str = "md5") -> bytes:
    """
    Calculate the digest of a blob payload.

    The service reports the MD5 of the uploaded bytes as the blob's
    content hash, so the raw digest is returned rather than its hex form.

    Args:
        data: Blob payload
        hash_algorithm: Hash algorithm to use (default: "md5")

    Returns:
        Raw digest bytes

    Raises:
        ValueError: If hash algorithm is not supported
    """
    try:
        hash_obj = hashlib.new(hash_algorithm)
    except ValueError as e:
        raise ValueError(f"Unsupported hash algorithm '{hash_algorithm}': {str(e)}")

    hash_obj.update(data)
    return hash_obj.digest()
