"""Lambda artifact packaging.

This module handles:
- Gathering auxiliary files matched by `includeFiles` patterns
- Merging them with everything in the output root
- Producing the Lambda artifact and its deterministic zip
"""

from __future__ import annotations

import hashlib
import io
import logging
import re
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

from go_lambda_builder.files import FileFsRef, LocalFile, glob
from go_lambda_builder.types import HANDLER_NAME, RUNTIME

logger = logging.getLogger(__name__)

# Exported builder configuration
BUILDER_CONFIG = {"max_lambda_size": "10mb"}

# Fixed timestamp for zip entries so identical inputs zip identically
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)

SIZE_UNITS = {"b": 1, "kb": 1024, "mb": 1024**2, "gb": 1024**3}
SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmg]?b)?\s*$", re.IGNORECASE)


@dataclass
class Artifact:
    """Deployable Lambda produced by one build.

    Attributes:
        files: Files to ship, keyed by path inside the Lambda.
        handler: Executable the runtime invokes.
        runtime: Lambda runtime identifier.
        environment: Environment variables for the function.
    """

    files: dict[str, LocalFile]
    handler: str = HANDLER_NAME
    runtime: str = RUNTIME
    environment: dict[str, str] = field(default_factory=dict)

    def to_zip(self) -> bytes:
        """Zip the artifact's files in sorted order."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for name in sorted(self.files):
                file = self.files[name]
                info = zipfile.ZipInfo(name, date_time=ZIP_DATE_TIME)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = (0o100000 | file.mode) << 16
                zf.writestr(info, file.read_bytes())
        return buffer.getvalue()

    def summary(self) -> dict[str, object]:
        """Describe the artifact for JSON output."""
        data = self.to_zip()
        return {
            "handler": self.handler,
            "runtime": self.runtime,
            "environment": dict(self.environment),
            "files": sorted(self.files),
            "zip_size_bytes": len(data),
            "zip_sha256": hashlib.sha256(data).hexdigest(),
        }


def parse_size(value: str) -> int:
    """Convert a size string such as '10mb' to bytes.

    Raises:
        ValueError: If the string is not a size.
    """
    match = SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    return int(float(number) * SIZE_UNITS[(unit or "b").lower()])


def gather_extra_files(
    include_files: str | list[str] | None,
    entry_fs_path: Path,
) -> dict[str, FileFsRef]:
    """Collect auxiliary files relative to the entrypoint's directory.

    Args:
        include_files: A pattern, a list of patterns, or None.
        entry_fs_path: On-disk path of the entrypoint.

    Returns:
        Matched files; with several patterns later matches win.
    """
    if not include_files:
        return {}

    logger.info("Gathering extra files for the fs...")
    entry_dir = entry_fs_path.parent
    patterns = [include_files] if isinstance(include_files, str) else include_files

    extra: dict[str, FileFsRef] = {}
    for pattern in patterns:
        extra.update(glob(pattern, entry_dir))
    return extra


def create_lambda(
    files: dict[str, LocalFile],
    handler: str = HANDLER_NAME,
    runtime: str = RUNTIME,
    environment: dict[str, str] | None = None,
) -> Artifact:
    """Create a Lambda artifact from a file set."""
    return Artifact(
        files=files,
        handler=handler,
        runtime=runtime,
        environment=environment or {},
    )


def package(
    entrypoint: str,
    include_files: str | list[str] | None,
    entry_fs_path: Path,
    output_root: Path,
) -> dict[str, Artifact]:
    """Package the compiled output and auxiliary files.

    Output-root entries take precedence over auxiliary files on collision.

    Args:
        entrypoint: Logical path of the entrypoint (result key).
        include_files: Auxiliary file pattern(s).
        entry_fs_path: On-disk path of the entrypoint.
        output_root: Directory holding the compiled executable.

    Returns:
        Mapping of the entrypoint to its Artifact.
    """
    files: dict[str, LocalFile] = {}
    files.update(gather_extra_files(include_files, entry_fs_path))
    files.update(glob("**", output_root))

    lambda_ = create_lambda(files)
    logger.info("Packaged %d files for %s", len(files), entrypoint)
    return {entrypoint: lambda_}


__all__ = [
    "BUILDER_CONFIG",
    "Artifact",
    "create_lambda",
    "gather_extra_files",
    "package",
    "parse_size",
]
