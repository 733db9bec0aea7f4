"""Workspace provisioning for builds.

Each build gets two fresh temporary directories: a GOPATH-style module
root that receives the user's files under src/lambda, and an output root
that receives the compiled executable. They are never reused and never
removed here.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from go_lambda_builder.errors import WorkspaceError
from go_lambda_builder.files import (
    DOWNLOAD_TIMEOUT,
    DownloadError,
    File,
    FileFsRef,
    download,
)

logger = logging.getLogger(__name__)

MODULE_ROOT_PREFIX = "golambda_gopath_"
OUTPUT_ROOT_PREFIX = "golambda_out_"

# User files land here, relative to the module root
SOURCE_SUBPATH = Path("src") / "lambda"


@dataclass
class Workspace:
    """Directories owned by a single build.

    Attributes:
        module_root: GOPATH for the build.
        output_root: Directory holding the compiled executable.
        source_root: Where user files were downloaded.
        files: Downloaded files keyed by logical path.
    """

    module_root: Path
    output_root: Path
    source_root: Path
    files: dict[str, FileFsRef] = field(default_factory=dict)

    def entry_path(self, entrypoint: str) -> Path:
        """Return the on-disk path of a downloaded logical file."""
        return self.files[entrypoint].fs_path


def get_writable_directory(prefix: str, base_dir: Path | None = None) -> Path:
    """Create a fresh writable temporary directory.

    Args:
        prefix: Directory name prefix.
        base_dir: Parent directory (system default if None).

    Returns:
        Path to the created directory.
    """
    if base_dir is not None:
        base_dir.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))


def acquire_directories(base_dir: Path | None = None) -> tuple[Path, Path]:
    """Create the module root and output root concurrently.

    Returns:
        Tuple of (module_root, output_root).

    Raises:
        WorkspaceError: If either directory cannot be created.
    """
    with ThreadPoolExecutor(max_workers=2) as pool:
        module_future = pool.submit(
            get_writable_directory, MODULE_ROOT_PREFIX, base_dir
        )
        output_future = pool.submit(
            get_writable_directory, OUTPUT_ROOT_PREFIX, base_dir
        )
        try:
            return module_future.result(), output_future.result()
        except OSError as e:
            raise WorkspaceError(
                f"Failed to create working directory: {e}",
                code="directory_error",
            ) from e


def provision(
    files: Mapping[str, File],
    entrypoint: str,
    tmp_dir: Path | None = None,
    client: httpx.Client | None = None,
    download_timeout: float = DOWNLOAD_TIMEOUT,
) -> Workspace:
    """Acquire working directories and download user files.

    Args:
        files: User files keyed by logical path.
        entrypoint: Logical path of the entrypoint; must be in files.
        tmp_dir: Parent for the temporary directories.
        client: Optional HTTPX client for remote files.
        download_timeout: Timeout in seconds for each remote file.

    Returns:
        Workspace with every logical file resolved on disk.

    Raises:
        WorkspaceError: If directories or files cannot be materialized.
    """
    if entrypoint not in files:
        raise WorkspaceError(
            f'Entrypoint "{entrypoint}" is not among the provided files',
            code="entrypoint_missing",
        )

    logger.info("Downloading user files...")
    module_root, output_root = acquire_directories(tmp_dir)
    source_root = module_root / SOURCE_SUBPATH

    try:
        downloaded = download(
            files, source_root, client=client, timeout=download_timeout
        )
    except (DownloadError, OSError) as e:
        logger.error("Failed to download user files: %s", e)
        raise WorkspaceError(
            f"Failed to download user files: {e}",
            code=getattr(e, "code", "download_error"),
        ) from e

    logger.debug(
        "Provisioned workspace (module_root=%s, output_root=%s)",
        module_root,
        output_root,
    )
    return Workspace(
        module_root=module_root,
        output_root=output_root,
        source_root=source_root,
        files=downloaded,
    )


__all__ = [
    "MODULE_ROOT_PREFIX",
    "OUTPUT_ROOT_PREFIX",
    "SOURCE_SUBPATH",
    "Workspace",
    "acquire_directories",
    "get_writable_directory",
    "provision",
]
