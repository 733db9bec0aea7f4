"""Go Lambda Builder - compile a Go HTTP handler into a deployable Lambda.

This package provides orchestration around the Go toolchain for turning a
single exported handler function into a standalone executable and packaging
it with its auxiliary files.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
