"""Build driver: dependency resolution followed by compilation."""

from __future__ import annotations

import logging
from pathlib import Path

from go_lambda_builder.builds.strategy import BuildStrategy, DefaultPackage
from go_lambda_builder.builds.toolchain import GoToolchain, ToolchainError
from go_lambda_builder.errors import CompileError, DependencyResolutionError
from go_lambda_builder.types import HANDLER_NAME

logger = logging.getLogger(__name__)


def executable_path(output_root: Path) -> Path:
    """Destination of the compiled handler, identical for both strategies."""
    return output_root / HANDLER_NAME


def resolve_dependencies(toolchain: GoToolchain) -> None:
    """Fetch the imports of the entrypoint directory with `go get`.

    Raises:
        DependencyResolutionError: If `go get` fails.
    """
    try:
        toolchain.get()
    except ToolchainError as e:
        logger.error("Failed to `go get`")
        raise DependencyResolutionError(
            str(e), output=e.output, exit_code=e.exit_code
        ) from e


def compile_executable(toolchain: GoToolchain, sources: list[Path], dest: Path) -> Path:
    """Compile sources into dest.

    Raises:
        CompileError: If `go build` fails or leaves no executable behind.
    """
    logger.info("Running `go build`...")
    try:
        toolchain.build(sources, dest)
    except ToolchainError as e:
        logger.error("Failed to `go build`")
        raise CompileError(str(e), output=e.output, exit_code=e.exit_code) from e

    if not dest.is_file():
        raise CompileError(
            f"`go build` succeeded but produced no executable at {dest}",
            code="missing_output",
        )
    return dest


def build_executable(
    strategy: BuildStrategy,
    toolchain: GoToolchain,
    sources: list[Path],
    dest: Path,
) -> Path:
    """Resolve dependencies as the strategy requires, then compile.

    Named-package builds resolve dependencies during `go mod tidy`, so only
    package-main builds run `go get` here.

    Args:
        strategy: Selected build strategy.
        toolchain: Toolchain bound to the entrypoint directory.
        sources: Ordered source files to compile.
        dest: Destination executable path.

    Returns:
        Path to the compiled executable.

    Raises:
        DependencyResolutionError: If `go get` fails.
        CompileError: If compilation fails.
    """
    if isinstance(strategy, DefaultPackage):
        resolve_dependencies(toolchain)
    return compile_executable(toolchain, sources, dest)


__all__ = [
    "build_executable",
    "compile_executable",
    "executable_path",
    "resolve_dependencies",
]
