"""Build service module.

This module provides the high-level build API:
- build(): provision, analyze, synthesize, compile, and package one entrypoint
- build_request(): the same, from a validated BuildRequestSchema
- describe_failure(): structured failure record for frontends

Every stage raises a BuilderError subclass; the first failure aborts the
build and no partial artifact is returned. Temporary directories are left
in place for the caller to inspect or remove.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING

from go_lambda_builder.builds.adapter import (
    check_reserved_filenames,
    write_default_adapter,
    write_named_adapter,
)
from go_lambda_builder.builds.analyzer import Analyzer, ExternalAnalyzer, analyze
from go_lambda_builder.builds.driver import build_executable, executable_path
from go_lambda_builder.builds.modules import (
    prepare_module,
    relocate_entrypoint,
    tidy_module,
)
from go_lambda_builder.builds.packager import Artifact, package
from go_lambda_builder.builds.strategy import (
    BuildStrategy,
    DefaultPackage,
    NamedPackage,
    select_strategy,
)
from go_lambda_builder.builds.toolchain import GoToolchain
from go_lambda_builder.builds.workspace import provision
from go_lambda_builder.config import get_settings
from go_lambda_builder.errors import BuilderError
from go_lambda_builder.types import OperationResult

if TYPE_CHECKING:
    import httpx

    from go_lambda_builder.builds.schema import BuildConfigSchema, BuildRequestSchema
    from go_lambda_builder.config import Settings
    from go_lambda_builder.files import File

logger = logging.getLogger(__name__)

ToolchainFactory = Callable[..., GoToolchain]


def _make_toolchain(
    toolchain_factory: ToolchainFactory,
    settings: Settings,
    gopath: Path,
    cwd: Path,
    go_modules: bool,
) -> GoToolchain:
    return toolchain_factory(
        gopath=gopath,
        cwd=cwd,
        goos=settings.goos,
        goarch=settings.goarch,
        go_modules=go_modules,
        go_bin=settings.go_bin,
        ldflags=settings.ldflags,
        timeout=settings.build_timeout,
    )


def _compile_default(
    strategy: DefaultPackage,
    toolchain: GoToolchain,
    entry_fs_path: Path,
    dest: Path,
) -> Path:
    """Compile a package-main handler together with its adapter."""
    adapter_path = write_default_adapter(entry_fs_path.parent, strategy.function_name)
    sources = [adapter_path, entry_fs_path]
    return build_executable(strategy, toolchain, sources, dest)


def _compile_named(
    strategy: NamedPackage,
    toolchain: GoToolchain,
    entrypoint: str,
    entry_fs_path: Path,
    dest: Path,
) -> Path:
    """Compile a handler from a named package through go modules."""
    entry_dir = entry_fs_path.parent
    layout = prepare_module(entry_dir, strategy.package_name)
    adapter_path = write_named_adapter(
        entry_dir, layout.import_path, strategy.handler_reference
    )
    relocate_entrypoint(entry_fs_path, entry_dir, strategy.package_name, entrypoint)
    tidy_module(toolchain)
    return build_executable(strategy, toolchain, [adapter_path], dest)


def build(
    files: Mapping[str, File],
    entrypoint: str,
    config: BuildConfigSchema | None = None,
    settings: Settings | None = None,
    analyzer: Analyzer | None = None,
    toolchain_factory: ToolchainFactory = GoToolchain,
    client: httpx.Client | None = None,
) -> dict[str, Artifact]:
    """Build a Lambda from a Go entrypoint.

    This is the main entry point for the build pipeline. It:
    1. Provisions a module root and output root and downloads the files
    2. Analyzes the entrypoint for its exported handler
    3. Selects the package strategy
    4. Writes the adapter (and normalizes go.mod for named packages)
    5. Resolves dependencies and compiles `<output_root>/handler`
    6. Packages the output root and auxiliary files

    Args:
        files: User files keyed by logical path.
        entrypoint: Logical path of the handler source.
        config: Builder options (auxiliary files).
        settings: Application settings.
        analyzer: Analyzer callable (defaults to the configured executable).
        toolchain_factory: Callable creating the Go toolchain.
        client: Optional HTTPX client for remote files.

    Returns:
        Mapping of the entrypoint to its Artifact.

    Raises:
        BuilderError: Any stage failure, see go_lambda_builder.errors.
    """
    if settings is None:
        settings = get_settings()
    if analyzer is None:
        analyzer = ExternalAnalyzer(
            settings.analyzer_bin, timeout=settings.analyze_timeout
        )
    include_files = config.include_files if config is not None else None

    check_reserved_filenames(list(files))

    workspace = provision(
        files,
        entrypoint,
        tmp_dir=settings.tmp_dir,
        client=client,
        download_timeout=settings.download_timeout,
    )
    entry_fs_path = workspace.entry_path(entrypoint)

    descriptor = analyze(entrypoint, entry_fs_path, analyzer)
    strategy: BuildStrategy = select_strategy(descriptor)
    logger.debug("Selected %s for %s", type(strategy).__name__, entrypoint)

    dest = executable_path(workspace.output_root)
    toolchain = _make_toolchain(
        toolchain_factory,
        settings,
        gopath=workspace.module_root,
        cwd=entry_fs_path.parent,
        go_modules=isinstance(strategy, NamedPackage),
    )

    if isinstance(strategy, NamedPackage):
        _compile_named(strategy, toolchain, entrypoint, entry_fs_path, dest)
    else:
        _compile_default(strategy, toolchain, entry_fs_path, dest)

    return package(
        entrypoint,
        include_files,
        entry_fs_path,
        workspace.output_root,
    )


def build_request(
    request: BuildRequestSchema,
    settings: Settings | None = None,
    analyzer: Analyzer | None = None,
    toolchain_factory: ToolchainFactory = GoToolchain,
    client: httpx.Client | None = None,
    base_path: Path | None = None,
) -> dict[str, Artifact]:
    """Build from a validated request.

    Args:
        request: Build request.
        base_path: Base for resolving relative local file paths.

    See build() for the remaining arguments.
    """
    return build(
        request.to_files(base_path),
        request.entrypoint,
        config=request.config,
        settings=settings,
        analyzer=analyzer,
        toolchain_factory=toolchain_factory,
        client=client,
    )


def describe_failure(error: BuilderError) -> OperationResult:
    """Turn a build error into a structured failure record."""
    return OperationResult(
        success=False,
        message=str(error),
        code=error.code,
        details=dict(error.details),
    )


__all__ = ["build", "build_request", "describe_failure"]
