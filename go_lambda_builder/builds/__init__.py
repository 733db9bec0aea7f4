"""Build orchestration module.

This module handles:
- Workspace provisioning
- Entrypoint analysis and strategy selection
- Adapter synthesis and go.mod normalization
- Running the Go toolchain
- Packaging the Lambda artifact
"""

from go_lambda_builder.builds.packager import Artifact
from go_lambda_builder.builds.strategy import (
    BuildStrategy,
    DefaultPackage,
    NamedPackage,
    select_strategy,
)

__all__ = [
    "Artifact",
    "BuildStrategy",
    "DefaultPackage",
    "NamedPackage",
    "select_strategy",
]

# Lazy imports for submodules to avoid circular imports
# Access via go_lambda_builder.builds.service, etc.
