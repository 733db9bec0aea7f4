"""Adapter source synthesis.

The adapter provides `func main()` and hands the user's handler to the
Lambda bridge. `go build` refuses to compile files from different
directories, so the adapter is always written beside the entrypoint.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from go_lambda_builder.errors import TemplateWriteError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "main.go"
NAMED_TEMPLATE = "main__mod__.go"

# Named so that a user file called main.go can coexist with the adapter
DEFAULT_ADAPTER_FILENAME = "main__lambda__go__.go"
NAMED_ADAPTER_FILENAME = "main__mod__.go"
RESERVED_FILENAMES = frozenset({DEFAULT_ADAPTER_FILENAME, NAMED_ADAPTER_FILENAME})

FUNC_PLACEHOLDER = "__HANDLER_FUNC_NAME"
PACKAGE_PLACEHOLDER = "__HANDLER_PACKAGE_NAME"


def load_template(name: str) -> str:
    """Read an adapter template shipped with the package.

    Raises:
        TemplateWriteError: If the template cannot be read.
    """
    try:
        return (
            resources.files("go_lambda_builder.builds")
            .joinpath("templates")
            .joinpath(name)
            .read_text(encoding="utf-8")
        )
    except OSError as e:
        raise TemplateWriteError(
            f"Failed to read adapter template {name}: {e}",
            code="template_read_error",
        ) from e


def render_default_adapter(function_name: str) -> str:
    """Render the adapter for a handler in package main."""
    return load_template(DEFAULT_TEMPLATE).replace(FUNC_PLACEHOLDER, function_name)


def render_named_adapter(import_path: str, handler_reference: str) -> str:
    """Render the adapter for a handler in an imported package.

    Args:
        import_path: Fully-qualified import path of the user package.
        handler_reference: `<package>.<function>` reference.
    """
    return (
        load_template(NAMED_TEMPLATE)
        .replace(PACKAGE_PLACEHOLDER, import_path)
        .replace(FUNC_PLACEHOLDER, handler_reference)
    )


def check_reserved_filenames(logical_paths: list[str]) -> None:
    """Reject user files that would be overwritten by an adapter.

    Raises:
        TemplateWriteError: If a user file uses a reserved name.
    """
    for logical_path in logical_paths:
        name = logical_path.rsplit("/", 1)[-1]
        if name in RESERVED_FILENAMES:
            raise TemplateWriteError(
                f'"{logical_path}" uses a filename reserved for the generated adapter',
                code="reserved_filename",
            )


def _write_adapter(path: Path, contents: str) -> Path:
    try:
        path.write_text(contents, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write adapter %s", path)
        raise TemplateWriteError(
            f"Failed to write adapter {path}: {e}",
            path=path,
        ) from e
    logger.debug("Wrote adapter %s", path)
    return path


def write_default_adapter(entry_dir: Path, function_name: str) -> Path:
    """Write the package-main adapter beside the entrypoint.

    Returns:
        Path to the written adapter.

    Raises:
        TemplateWriteError: On any I/O failure.
    """
    contents = render_default_adapter(function_name)
    return _write_adapter(entry_dir / DEFAULT_ADAPTER_FILENAME, contents)


def write_named_adapter(
    entry_dir: Path,
    import_path: str,
    handler_reference: str,
) -> Path:
    """Write the cross-package adapter beside the entrypoint.

    Returns:
        Path to the written adapter.

    Raises:
        TemplateWriteError: On any I/O failure.
    """
    contents = render_named_adapter(import_path, handler_reference)
    return _write_adapter(entry_dir / NAMED_ADAPTER_FILENAME, contents)


__all__ = [
    "DEFAULT_ADAPTER_FILENAME",
    "FUNC_PLACEHOLDER",
    "NAMED_ADAPTER_FILENAME",
    "PACKAGE_PLACEHOLDER",
    "RESERVED_FILENAMES",
    "check_reserved_filenames",
    "load_template",
    "render_default_adapter",
    "render_named_adapter",
    "write_default_adapter",
    "write_named_adapter",
]
