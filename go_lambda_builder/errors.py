"""Error taxonomy for the build pipeline.

Every stage raises a subclass of BuilderError with a stable code that
frontends (CLI, HTTP API) surface to users. All of them abort the build.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

WORKSPACE_ERROR = "workspace_error"
ANALYSIS_ERROR = "analysis_error"
NO_HANDLER_FOUND = "no_handler_found"
TEMPLATE_WRITE_ERROR = "template_write_error"
MODULE_SETUP_ERROR = "module_setup_error"
DEPENDENCY_RESOLUTION_ERROR = "dependency_resolution_error"
COMPILE_ERROR = "compile_error"


class BuilderError(Exception):
    """Base error for build pipeline failures."""

    def __init__(
        self,
        message: str,
        code: str = "builder_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": str(self),
            "details": self.details,
        }


class WorkspaceError(BuilderError):
    """Raised when working directories cannot be created or populated."""

    def __init__(self, message: str, code: str = WORKSPACE_ERROR) -> None:
        super().__init__(message, code=code)


class AnalysisError(BuilderError):
    """Raised when the source analyzer fails on the entrypoint."""

    def __init__(
        self, message: str, entrypoint: str, code: str = ANALYSIS_ERROR
    ) -> None:
        super().__init__(message, code=code, details={"entrypoint": entrypoint})
        self.entrypoint = entrypoint


class NoHandlerFoundError(BuilderError):
    """Raised when the entrypoint exports no handler function."""

    def __init__(self, entrypoint: str, code: str = NO_HANDLER_FOUND) -> None:
        super().__init__(
            f'Could not find an exported function in "{entrypoint}"',
            code=code,
            details={"entrypoint": entrypoint},
        )
        self.entrypoint = entrypoint


class TemplateWriteError(BuilderError):
    """Raised when an adapter source file cannot be synthesized."""

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        code: str = TEMPLATE_WRITE_ERROR,
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={"path": str(path)} if path is not None else None,
        )
        self.path = path


class ModuleSetupError(BuilderError):
    """Raised when a step of go.mod normalization fails."""

    def __init__(
        self,
        message: str,
        step: str,
        output: str | None = None,
        code: str = MODULE_SETUP_ERROR,
    ) -> None:
        details: dict[str, Any] = {"step": step}
        if output:
            details["output"] = output
        super().__init__(message, code=code, details=details)
        self.step = step
        self.output = output


class _ToolchainFailure(BuilderError):
    """Shared shape for errors carrying raw toolchain diagnostics.

    The message is the toolchain's own output when there is any, so that
    users see the compiler or resolver text rather than a wrapper.
    """

    def __init__(
        self,
        message: str,
        output: str | None = None,
        exit_code: int | None = None,
        code: str = "toolchain_error",
    ) -> None:
        details: dict[str, Any] = {"exit_code": exit_code}
        if output:
            details["output"] = output
        if output and output.strip():
            message = output.strip()
        super().__init__(message, code=code, details=details)
        self.output = output
        self.exit_code = exit_code


class DependencyResolutionError(_ToolchainFailure):
    """Raised when `go get` fails."""

    def __init__(
        self,
        message: str,
        output: str | None = None,
        exit_code: int | None = None,
        code: str = DEPENDENCY_RESOLUTION_ERROR,
    ) -> None:
        super().__init__(message, output=output, exit_code=exit_code, code=code)


class CompileError(_ToolchainFailure):
    """Raised when `go build` fails or produces no executable."""

    def __init__(
        self,
        message: str,
        output: str | None = None,
        exit_code: int | None = None,
        code: str = COMPILE_ERROR,
    ) -> None:
        super().__init__(message, output=output, exit_code=exit_code, code=code)


__all__ = [
    "ANALYSIS_ERROR",
    "COMPILE_ERROR",
    "DEPENDENCY_RESOLUTION_ERROR",
    "MODULE_SETUP_ERROR",
    "NO_HANDLER_FOUND",
    "TEMPLATE_WRITE_ERROR",
    "WORKSPACE_ERROR",
    "AnalysisError",
    "BuilderError",
    "CompileError",
    "DependencyResolutionError",
    "ModuleSetupError",
    "NoHandlerFoundError",
    "TemplateWriteError",
    "WorkspaceError",
]
