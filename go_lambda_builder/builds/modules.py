"""go.mod normalization for handlers outside package main.

This module handles:
- Creating a minimal go.mod when the user did not ship one
- Deriving the import path of the user package from go.mod
- Moving the entrypoint into a directory named after its package
- Running `go mod tidy` once the adapter is in place
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from go_lambda_builder.builds.toolchain import GoToolchain, ToolchainError
from go_lambda_builder.errors import ModuleSetupError

logger = logging.getLogger(__name__)

GO_MOD_FILENAME = "go.mod"


@dataclass(frozen=True)
class ModuleLayout:
    """go.mod state for a named-package build.

    Attributes:
        descriptor_path: Path to go.mod.
        import_path: Fully-qualified import path of the user package.
        created: Whether go.mod was synthesized for this build.
    """

    descriptor_path: Path
    import_path: str
    created: bool


def default_module_descriptor(package_name: str) -> str:
    """Content of a synthesized go.mod."""
    return f"module {package_name}"


def read_module_root(descriptor_path: Path) -> str:
    """Return the module path declared on the first line of go.mod.

    Raises:
        ModuleSetupError: If the file cannot be read or has no module directive.
    """
    try:
        contents = descriptor_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ModuleSetupError(
            f"Failed to read {descriptor_path}: {e}", step="read_descriptor"
        ) from e

    first_line = contents.split("\n", 1)[0].strip()
    tokens = first_line.split()
    if len(tokens) < 2 or tokens[0] != "module":
        raise ModuleSetupError(
            f"{descriptor_path} does not start with a module directive: {first_line!r}",
            step="read_descriptor",
        )
    return tokens[1].strip('"')


def package_import_path(package_name: str, module_root: str | None) -> str:
    """Import path of the user package.

    Args:
        package_name: Declared Go package.
        module_root: Module path from an existing go.mod, or None if the
            descriptor was synthesized.
    """
    if module_root is None:
        return f"{package_name}/{package_name}"
    return f"{module_root}/{package_name}"


def prepare_module(entry_dir: Path, package_name: str) -> ModuleLayout:
    """Ensure go.mod exists beside the entrypoint and derive the import path.

    Args:
        entry_dir: Directory containing the entrypoint.
        package_name: Declared Go package of the handler.

    Returns:
        ModuleLayout for the build.

    Raises:
        ModuleSetupError: If any step fails.
    """
    descriptor_path = entry_dir / GO_MOD_FILENAME

    try:
        existed = descriptor_path.is_file()
    except OSError as e:
        raise ModuleSetupError(
            f"Failed to check for {descriptor_path}: {e}", step="check_descriptor"
        ) from e

    if existed:
        module_root: str | None = read_module_root(descriptor_path)
        logger.debug("Using existing go.mod (module %s)", module_root)
    else:
        module_root = None
        try:
            descriptor_path.write_text(
                default_module_descriptor(package_name), encoding="utf-8"
            )
        except OSError as e:
            logger.error("Failed to create default go.mod for %s", package_name)
            raise ModuleSetupError(
                f"Failed to create default go.mod for {package_name}: {e}",
                step="create_descriptor",
            ) from e
        logger.debug("Created default go.mod for %s", package_name)

    return ModuleLayout(
        descriptor_path=descriptor_path,
        import_path=package_import_path(package_name, module_root),
        created=not existed,
    )


def relocated_entry_path(entry_dir: Path, package_name: str, entrypoint: str) -> Path:
    """Destination of the entrypoint inside its package directory.

    Only the final component of the logical path is kept.
    """
    return entry_dir / package_name / PurePosixPath(entrypoint).name


def relocate_entrypoint(
    entry_fs_path: Path,
    entry_dir: Path,
    package_name: str,
    entrypoint: str,
) -> Path:
    """Move the entrypoint into `<entry_dir>/<package_name>/`.

    Returns:
        The new path of the entrypoint.

    Raises:
        ModuleSetupError: If the move fails.
    """
    destination = relocated_entry_path(entry_dir, package_name, entrypoint)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(entry_fs_path), str(destination))
    except OSError as e:
        logger.error("Failed to move entry to package folder")
        raise ModuleSetupError(
            f"Failed to move {entry_fs_path} to {destination}: {e}",
            step="relocate",
        ) from e
    logger.debug("Moved %s to %s", entry_fs_path, destination)
    return destination


def tidy_module(toolchain: GoToolchain) -> str:
    """Run `go mod tidy` so every required dependency is declared.

    Returns:
        Toolchain output.

    Raises:
        ModuleSetupError: If tidy fails; carries the raw output.
    """
    logger.info("Tidying go.mod file")
    try:
        return toolchain.mod_tidy()
    except ToolchainError as e:
        logger.error("Failed to `go mod tidy`")
        raise ModuleSetupError(
            e.output.strip() if e.output and e.output.strip() else str(e),
            step="tidy",
            output=e.output,
        ) from e


__all__ = [
    "GO_MOD_FILENAME",
    "ModuleLayout",
    "default_module_descriptor",
    "package_import_path",
    "prepare_module",
    "read_module_root",
    "relocate_entrypoint",
    "relocated_entry_path",
    "tidy_module",
]
