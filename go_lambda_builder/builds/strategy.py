"""Package strategy selection.

A handler declared in package main is compiled together with an adapter in
its own directory. A handler in any other package is moved into a module
sub-package and imported by the adapter.
"""

from dataclasses import dataclass

from go_lambda_builder.types import MAIN_PACKAGE, HandlerDescriptor


@dataclass(frozen=True)
class DefaultPackage:
    """Handler lives in the program's main package."""

    function_name: str


@dataclass(frozen=True)
class NamedPackage:
    """Handler lives in a non-main package."""

    function_name: str
    package_name: str

    @property
    def handler_reference(self) -> str:
        """Qualified `<package>.<function>` reference used by the adapter."""
        return f"{self.package_name}.{self.function_name}"


BuildStrategy = DefaultPackage | NamedPackage


def select_strategy(descriptor: HandlerDescriptor) -> BuildStrategy:
    """Choose the build strategy for a handler."""
    if descriptor.package_name == MAIN_PACKAGE:
        return DefaultPackage(function_name=descriptor.function_name)
    return NamedPackage(
        function_name=descriptor.function_name,
        package_name=descriptor.package_name,
    )


__all__ = ["BuildStrategy", "DefaultPackage", "NamedPackage", "select_strategy"]
