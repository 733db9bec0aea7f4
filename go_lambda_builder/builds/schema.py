"""Pydantic models for build requests.

A build request mirrors the builder input contract:
`{files: {logicalPath: file}, entrypoint, config: {includeFiles?}}`.

Two request shapes exist:
- BuildRequestSchema accepts inline data, URLs, and local paths (CLI)
- InlineBuildRequestSchema accepts inline data only (HTTP API)
"""

import base64
import binascii
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from go_lambda_builder.files import (
    DEFAULT_FILE_MODE,
    File,
    FileBlob,
    FileFsRef,
    FileRef,
)


def decode_base64(data: str) -> bytes:
    """Decode base64 text, ignoring line breaks.

    Raises:
        ValueError: If the text is not valid base64.
    """
    try:
        return base64.b64decode("".join(data.split()), validate=True)
    except binascii.Error as e:
        raise ValueError(f"data is not valid base64: {e}") from e


class InlineFileSchema(BaseModel):
    """Schema for one user file given inline.

    Attributes:
        data: Inline content.
        encoding: Encoding of `data` (utf-8 text or base64).
        mode: File mode.
    """

    model_config = ConfigDict(extra="forbid")

    data: str = Field(description="Inline file content")
    encoding: Literal["utf-8", "base64"] = Field(
        default="utf-8", description="Encoding of inline data"
    )
    mode: int = Field(default=DEFAULT_FILE_MODE, ge=0, le=0o7777)

    @model_validator(mode="after")
    def validate_encoding(self) -> "InlineFileSchema":
        """Validate that base64 data decodes."""
        if self.data is not None and self.encoding == "base64":
            decode_base64(self.data)
        return self

    def to_file(self, base_path: Path | None = None) -> File:
        """Convert to an in-memory blob."""
        if self.encoding == "base64":
            raw = decode_base64(self.data or "")
        else:
            raw = (self.data or "").encode("utf-8")
        return FileBlob(data=raw, mode=self.mode)


class FileSchema(InlineFileSchema):
    """Schema for one user file.

    Exactly one of `data`, `url`, or `path` must be given.

    Attributes:
        url: Remote location of the content.
        digest: Optional SHA-256 hex digest of remote content.
        path: Local filesystem path.
    """

    data: str | None = Field(default=None, description="Inline file content")
    url: str | None = Field(default=None, description="URL of remote content")
    digest: str | None = Field(
        default=None, description="SHA-256 digest of remote content"
    )
    path: str | None = Field(default=None, description="Local file path")

    @model_validator(mode="after")
    def validate_single_source(self) -> "FileSchema":
        """Validate that exactly one content source is set."""
        sources = [s for s in (self.data, self.url, self.path) if s is not None]
        if len(sources) != 1:
            raise ValueError("exactly one of 'data', 'url', or 'path' is required")
        return self

    def to_file(self, base_path: Path | None = None) -> File:
        """Convert to a file reference.

        Args:
            base_path: Base for resolving relative local paths.
        """
        if self.data is not None:
            return super().to_file(base_path)
        if self.url is not None:
            return FileRef(url=self.url, digest=self.digest, mode=self.mode)
        fs_path = Path(self.path or "")
        if base_path is not None and not fs_path.is_absolute():
            fs_path = base_path / fs_path
        return FileFsRef(fs_path=fs_path, mode=self.mode)


class BuildConfigSchema(BaseModel):
    """Schema for builder options.

    Attributes:
        include_files: Glob pattern or patterns of auxiliary files to ship,
            relative to the entrypoint's directory.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    include_files: str | list[str] | None = Field(
        default=None,
        alias="includeFiles",
        description="Auxiliary file glob pattern(s)",
    )


class BuildRequestSchema(BaseModel):
    """Schema for a build request.

    Attributes:
        files: User files keyed by logical path.
        entrypoint: Logical path of the handler source.
        config: Builder options.
    """

    model_config = ConfigDict(extra="forbid")

    files: dict[str, FileSchema] = Field(description="User files by logical path")
    entrypoint: str = Field(min_length=1, description="Handler source file")
    config: BuildConfigSchema = Field(default_factory=BuildConfigSchema)

    @model_validator(mode="after")
    def validate_entrypoint_present(self) -> "BuildRequestSchema":
        """Validate that the entrypoint is one of the files."""
        if self.entrypoint not in self.files:
            raise ValueError(f"entrypoint '{self.entrypoint}' is not in files")
        return self

    def to_files(self, base_path: Path | None = None) -> dict[str, File]:
        """Convert all entries to file references."""
        return {
            logical_path: file_schema.to_file(base_path)
            for logical_path, file_schema in self.files.items()
        }


class InlineBuildRequestSchema(BuildRequestSchema):
    """Schema for a build request whose files are all inline.

    Entries naming a local `path` or a remote `url` fail validation, so
    the caller never reads server files or fetches arbitrary URLs.
    """

    files: dict[str, InlineFileSchema] = Field(  # type: ignore[assignment]
        description="Inline user files by logical path"
    )


__all__ = [
    "BuildConfigSchema",
    "BuildRequestSchema",
    "FileSchema",
    "InlineBuildRequestSchema",
    "InlineFileSchema",
    "decode_base64",
]
