"""Shared type definitions for go_lambda_builder.

This module contains dataclasses and constants shared across
subpackages to avoid circular imports.
"""

from dataclasses import dataclass, field

# Package name the Go toolchain compiles directly as a program
MAIN_PACKAGE = "main"

# Fixed Lambda handler name and runtime identifier
HANDLER_NAME = "handler"
RUNTIME = "go1.x"


@dataclass(frozen=True)
class HandlerDescriptor:
    """Exported handler discovered in an entrypoint.

    Attributes:
        function_name: Name of the exported handler function.
        package_name: Go package the function is declared in.
    """

    function_name: str
    package_name: str


@dataclass
class OperationResult:
    """Result of an operation (build, analyze, etc.)."""

    success: bool
    message: str
    code: str | None = None
    details: dict[str, object] = field(default_factory=dict)


__all__ = [
    "HANDLER_NAME",
    "MAIN_PACKAGE",
    "RUNTIME",
    "HandlerDescriptor",
    "OperationResult",
]
