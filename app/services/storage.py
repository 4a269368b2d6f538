# =============================================================================
# Object Storage — Pluggable Backend Protocol
# =============================================================================
#
# Reads and writes byte blobs by key. Source appeal letters live under
# `documents/`; their extracted plain text lives under `documents-txt/`
# with the same base name and a `.txt` extension.
#
# ARCHITECTURE:
#   ObjectStore (Protocol)
#   ├── S3ObjectStore     — AWS S3 via boto3 (production)
#   ├── LocalObjectStore  — directory on disk (development, tests)
#   └── get_object_store() — factory, reads storage_backend from config
#
# Both implementations are synchronous. Async callers wrap them in
# asyncio.to_thread() (see corpus.py).
# =============================================================================

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when an object cannot be read from or written to storage."""


# ---------------------------------------------------------------------------
# Protocol Definition
# ---------------------------------------------------------------------------


class ObjectStore(Protocol):
    """Minimal key/value blob interface used by the document pipeline."""

    def get_bytes(self, key: str) -> bytes:
        """Return the object's content. Raises StorageError if missing."""
        ...

    def put_bytes(self, key: str, body: bytes, content_type: str) -> str:
        """Store the object and return its URL/URI."""
        ...

    def list_keys(self, prefix: str = "") -> list[str]:
        """List keys under a prefix, sorted."""
        ...


# ---------------------------------------------------------------------------
# Implementation 1: S3
# ---------------------------------------------------------------------------


class S3ObjectStore:
    """
    S3-backed object store.

    The boto3 client resolves credentials through the standard AWS chain
    (environment, shared config, instance role).
    """

    def __init__(
        self,
        bucket: str | None = None,
        region: str | None = None,
        client=None,
    ) -> None:
        self._bucket = bucket or settings.s3_bucket
        if not self._bucket:
            raise ValueError(
                "No S3 bucket configured. Set S3_BUCKET in .env "
                "or use STORAGE_BACKEND=local"
            )
        self._region = region or settings.aws_region
        self._client = client or boto3.client("s3", region_name=self._region)

        logger.info(
            "Initialized S3ObjectStore (bucket=%s, region=%s)",
            self._bucket, self._region,
        )

    def get_bytes(self, key: str) -> bytes:
        try:
            obj = self._client.get_object(Bucket=self._bucket, Key=key)
            return obj["Body"].read()
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to download s3://{self._bucket}/{key}: {e}") from e

    def put_bytes(self, key: str, body: bytes, content_type: str) -> str:
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload s3://{self._bucket}/{key}: {e}") from e

        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def list_keys(self, prefix: str = "") -> list[str]:
        keys: list[str] = []
        paginator = self._client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                keys.extend(item["Key"] for item in page.get("Contents", []))
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to list s3://{self._bucket}/{prefix}: {e}") from e
        return sorted(keys)


# ---------------------------------------------------------------------------
# Implementation 2: Local directory
# ---------------------------------------------------------------------------


class LocalObjectStore:
    """Object store rooted at a directory; keys map to relative paths."""

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root or settings.local_storage_dir)
        self._root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        relative = PurePosixPath(key)
        if relative.is_absolute() or ".." in relative.parts:
            raise StorageError(f"Invalid object key: {key!r}")
        return self._root.joinpath(*relative.parts)

    def get_bytes(self, key: str) -> bytes:
        path = self._path_for(key)
        if not path.is_file():
            raise StorageError(f"Object not found: {key}")
        return path.read_bytes()

    def put_bytes(self, key: str, body: bytes, content_type: str) -> str:
        path = self._path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(body)
        logger.debug("Stored %d bytes at %s (%s)", len(body), path, content_type)
        return path.resolve().as_uri()

    def list_keys(self, prefix: str = "") -> list[str]:
        keys = [
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        ]
        return sorted(k for k in keys if k.startswith(prefix))


# ---------------------------------------------------------------------------
# Key Helpers
# ---------------------------------------------------------------------------


def file_extension(key: str) -> str:
    """Lower-cased extension without the dot ('' when there is none)."""
    suffix = PurePosixPath(key).suffix
    return suffix[1:].lower() if suffix else ""


def text_key_for(source_key: str) -> str:
    """
    Map a source document key to the key of its extracted text.

        documents/POA I - Example.docx → documents-txt/POA I - Example.txt
    """
    key = source_key
    if key.startswith(settings.source_prefix):
        key = settings.text_prefix + key[len(settings.source_prefix):]

    path = PurePosixPath(key)
    if path.suffix:
        key = str(path.with_suffix(".txt"))
    else:
        key = f"{key}.txt"
    return key


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

_store: S3ObjectStore | LocalObjectStore | None = None


def get_object_store() -> S3ObjectStore | LocalObjectStore:
    """
    Return the configured object store (lazy singleton).

    - "s3" → S3ObjectStore
    - anything else → LocalObjectStore
    """
    global _store
    if _store is None:
        if settings.storage_backend == "s3":
            _store = S3ObjectStore()
        else:
            logger.info(
                "Using local object store at %s", settings.local_storage_dir,
            )
            _store = LocalObjectStore()
    return _store


# ---------------------------------------------------------------------------
# Convenience Wrappers
# ---------------------------------------------------------------------------


def download(key: str, store: ObjectStore | None = None) -> bytes:
    """Read an object from the given store, or the configured one."""
    return (store or get_object_store()).get_bytes(key)


def upload(
    key: str,
    body: bytes,
    content_type: str,
    store: ObjectStore | None = None,
) -> str:
    """Write an object and return its URL/URI."""
    return (store or get_object_store()).put_bytes(key, body, content_type)
