"""User file references, download, and glob helpers.

This module handles:
- File variants: inline blobs, on-disk references, and remote URLs
- Materializing a logical file set under a destination directory
- Globbing a directory into a logical file set
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

import httpx

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644

# Timeout for remote file downloads (seconds)
DOWNLOAD_TIMEOUT = 300

# Chunk size for downloads (bytes)
DOWNLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB


class DownloadError(Exception):
    """Raised when a user file cannot be materialized."""

    def __init__(self, message: str, code: str = "download_error") -> None:
        super().__init__(message)
        self.code = code


@dataclass
class FileBlob:
    """File content held in memory."""

    data: bytes
    mode: int = DEFAULT_FILE_MODE

    def read_bytes(self) -> bytes:
        return self.data

    def write_to(
        self,
        dest: Path,
        client: httpx.Client | None = None,
        timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        dest.write_bytes(self.data)


@dataclass
class FileFsRef:
    """File that already exists on the local filesystem."""

    fs_path: Path
    mode: int = DEFAULT_FILE_MODE

    def read_bytes(self) -> bytes:
        return self.fs_path.read_bytes()

    def write_to(
        self,
        dest: Path,
        client: httpx.Client | None = None,
        timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        dest.write_bytes(self.fs_path.read_bytes())


@dataclass
class FileRef:
    """File stored remotely, fetched over HTTP.

    Content is only materialized through write_to(), which streams it to
    disk and verifies the digest.

    Attributes:
        url: Location of the content.
        digest: Optional SHA-256 hex digest to verify against.
        mode: File mode applied once written.
    """

    url: str
    digest: str | None = None
    mode: int = DEFAULT_FILE_MODE

    def write_to(
        self,
        dest: Path,
        client: httpx.Client | None = None,
        timeout: float = DOWNLOAD_TIMEOUT,
    ) -> None:
        if client is None:
            with httpx.Client() as own_client:
                fetch_to_path(own_client, self.url, dest, self.digest, timeout)
        else:
            fetch_to_path(client, self.url, dest, self.digest, timeout)


File = FileBlob | FileFsRef | FileRef

# Files whose content can be read without a download
LocalFile = FileBlob | FileFsRef


def fetch_to_path(
    client: httpx.Client,
    url: str,
    dest_path: Path,
    expected_digest: str | None = None,
    timeout: float = DOWNLOAD_TIMEOUT,
    chunk_size: int = DOWNLOAD_CHUNK_SIZE,
) -> str:
    """Stream a remote file to disk, verifying its digest if given.

    Args:
        client: HTTPX client instance.
        url: URL to download from.
        dest_path: Destination path for the downloaded file.
        expected_digest: Expected SHA-256 hex digest (optional).
        timeout: Download timeout in seconds.
        chunk_size: Size of chunks to download.

    Returns:
        SHA-256 hex digest of the written content.

    Raises:
        DownloadError: If the download or verification fails.
    """
    logger.debug("Fetching %s to %s", url, dest_path)

    try:
        with client.stream("GET", url, timeout=timeout) as response:
            response.raise_for_status()

            sha256 = hashlib.sha256()
            with dest_path.open("wb") as f:
                for chunk in response.iter_bytes(chunk_size):
                    f.write(chunk)
                    sha256.update(chunk)

    except httpx.HTTPStatusError as e:
        raise DownloadError(
            f"HTTP error downloading {url}: {e.response.status_code} {e.response.reason_phrase}",
            code="http_error",
        ) from e
    except httpx.TimeoutException as e:
        raise DownloadError(f"Timeout downloading {url}", code="timeout") from e
    except httpx.RequestError as e:
        raise DownloadError(
            f"Network error downloading {url}: {e}",
            code="network_error",
        ) from e

    computed = sha256.hexdigest()
    if expected_digest and computed != expected_digest.lower():
        dest_path.unlink(missing_ok=True)
        raise DownloadError(
            f"Digest mismatch for {url}: expected {expected_digest}, got {computed}",
            code="digest_mismatch",
        )
    return computed


def _destination_for(dest: Path, logical_path: str) -> Path:
    """Resolve where a logical path lands under dest, rejecting escapes."""
    target = dest.joinpath(*PurePosixPath(logical_path).parts)
    try:
        target.resolve().relative_to(dest.resolve())
    except ValueError:
        raise DownloadError(
            f"Path traversal detected: {logical_path} resolves outside {dest}",
            code="path_traversal",
        ) from None
    return target


def download(
    files: Mapping[str, File],
    dest: Path,
    client: httpx.Client | None = None,
    timeout: float = DOWNLOAD_TIMEOUT,
) -> dict[str, FileFsRef]:
    """Materialize a logical file set under a directory.

    Args:
        files: Mapping of logical path to file.
        dest: Directory to write into (created if missing).
        client: Optional HTTPX client used for remote files.
        timeout: Timeout in seconds for each remote file.

    Returns:
        Mapping of logical path to the on-disk reference.

    Raises:
        DownloadError: If any file fails to materialize.
    """
    dest.mkdir(parents=True, exist_ok=True)
    downloaded: dict[str, FileFsRef] = {}

    for logical_path, file in files.items():
        target = _destination_for(dest, logical_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            file.write_to(target, client, timeout)
            target.chmod(file.mode)
        except OSError as e:
            raise DownloadError(
                f"Failed to write {logical_path} -> {target}: {e}",
                code="io_error",
            ) from e
        downloaded[logical_path] = FileFsRef(fs_path=target, mode=file.mode)

    logger.debug("Downloaded %d files to %s", len(downloaded), dest)
    return downloaded


def glob(pattern: str, base: Path) -> dict[str, FileFsRef]:
    """Match files under a directory.

    A pattern ending in `**` matches every file below the matched
    directories; other directory matches are skipped.

    Args:
        pattern: Glob pattern relative to base.
        base: Directory to search.

    Returns:
        Mapping of POSIX path relative to base to file reference, sorted.
    """
    if not base.is_dir():
        return {}

    matches: dict[str, FileFsRef] = {}
    recursive = pattern.endswith("**")

    for path in sorted(base.glob(pattern)):
        if path.is_dir():
            if not recursive:
                continue
            candidates = sorted(p for p in path.rglob("*") if p.is_file())
        elif path.is_file():
            candidates = [path]
        else:
            continue

        for candidate in candidates:
            rel = candidate.relative_to(base).as_posix()
            mode = candidate.stat().st_mode & 0o777
            matches[rel] = FileFsRef(fs_path=candidate, mode=mode)

    return dict(sorted(matches.items()))


__all__ = [
    "DEFAULT_FILE_MODE",
    "DownloadError",
    "File",
    "FileBlob",
    "FileFsRef",
    "FileRef",
    "LocalFile",
    "download",
    "fetch_to_path",
    "glob",
]
