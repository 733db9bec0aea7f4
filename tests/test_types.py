"""Tests for shared types module."""

import dataclasses

import pytest

from go_lambda_builder.types import (
    HANDLER_NAME,
    MAIN_PACKAGE,
    RUNTIME,
    HandlerDescriptor,
    OperationResult,
)


class TestConstants:
    """Test fixed Lambda constants."""

    def test_handler_and_runtime(self) -> None:
        """Handler and runtime should match the Go Lambda runtime."""
        assert HANDLER_NAME == "handler"
        assert RUNTIME == "go1.x"

    def test_main_package(self) -> None:
        """The program package should be main."""
        assert MAIN_PACKAGE == "main"


class TestHandlerDescriptor:
    """Test HandlerDescriptor dataclass."""

    def test_fields(self) -> None:
        """Descriptor should expose function and package names."""
        descriptor = HandlerDescriptor(function_name="Handler", package_name="main")

        assert descriptor.function_name == "Handler"
        assert descriptor.package_name == "main"

    def test_frozen(self) -> None:
        """Descriptor should be immutable."""
        descriptor = HandlerDescriptor(function_name="Run", package_name="mypkg")

        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.function_name = "Other"  # type: ignore[misc]

    def test_equality(self) -> None:
        """Descriptors with equal fields should compare equal."""
        assert HandlerDescriptor("Run", "mypkg") == HandlerDescriptor("Run", "mypkg")


class TestOperationResult:
    """Test OperationResult dataclass."""

    def test_success_result(self) -> None:
        """Successful result should default code and details."""
        result = OperationResult(success=True, message="built")

        assert result.success is True
        assert result.code is None
        assert result.details == {}

    def test_failure_result(self) -> None:
        """Failure result should carry code and details."""
        result = OperationResult(
            success=False,
            message="boom",
            code="compile_error",
            details={"exit_code": 2},
        )

        assert result.success is False
        assert result.code == "compile_error"
        assert result.details["exit_code"] == 2
