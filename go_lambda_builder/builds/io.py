"""Build request loading.

This module provides helpers for reading build requests from YAML/JSON
files and for describing a local directory as a build request.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from go_lambda_builder.builds.schema import (
    BuildConfigSchema,
    BuildRequestSchema,
    FileSchema,
)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping, got {type(data).__name__}")
    return data


def load_json(path: Path) -> dict[str, Any]:
    """Load a JSON file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def load_build_request(path: Path) -> BuildRequestSchema:
    """Load and validate a build request file.

    The format is chosen by extension: .json is JSON, anything else YAML.

    Raises:
        pydantic.ValidationError: If data does not match the schema.
    """
    data = load_json(path) if path.suffix.lower() == ".json" else load_yaml(path)
    return BuildRequestSchema.model_validate(data)


def request_from_directory(
    root: Path,
    entrypoint: str,
    include_files: str | list[str] | None = None,
) -> BuildRequestSchema:
    """Describe every file under a directory as a build request.

    Args:
        root: Project directory.
        entrypoint: Handler source, relative to root.
        include_files: Auxiliary file pattern(s).

    Raises:
        pydantic.ValidationError: If the entrypoint is not under root.
    """
    files = {
        path.relative_to(root).as_posix(): FileSchema(
            path=str(path.resolve()), mode=path.stat().st_mode & 0o777
        )
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
    return BuildRequestSchema(
        files=files,
        entrypoint=entrypoint,
        config=BuildConfigSchema(include_files=include_files),
    )


__all__ = [
    "load_build_request",
    "load_json",
    "load_yaml",
    "request_from_directory",
]
