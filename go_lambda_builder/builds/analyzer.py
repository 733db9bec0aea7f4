"""Entrypoint analysis.

Delegates to an external analyzer executable that prints
"<functionName>,<packageName>" for the exported handler in a Go file,
or nothing when there is none.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable
from pathlib import Path

from go_lambda_builder.errors import AnalysisError, NoHandlerFoundError
from go_lambda_builder.types import HandlerDescriptor

logger = logging.getLogger(__name__)

Analyzer = Callable[[Path], str]


class ExternalAnalyzer:
    """Run the analyzer executable on a source file."""

    def __init__(self, analyzer_bin: str, timeout: int = 60) -> None:
        self.analyzer_bin = analyzer_bin
        self.timeout = timeout

    def __call__(self, path: Path) -> str:
        """Return the analyzer's trimmed stdout for path.

        Raises:
            RuntimeError: If the analyzer exits non-zero.
            subprocess.TimeoutExpired: If it runs past the timeout.
            OSError: If it cannot be executed.
        """
        result = subprocess.run(
            [self.analyzer_bin, str(path)],
            capture_output=True,
            text=True,
            timeout=self.timeout,
            check=False,
        )
        if result.returncode != 0:
            raise RuntimeError(
                result.stderr.strip()
                or f"{self.analyzer_bin} exited with code {result.returncode}"
            )
        return result.stdout.strip()


def parse_analyzer_output(output: str) -> tuple[str, str]:
    """Split analyzer output into (function_name, package_name).

    Empty output yields two empty strings.

    Raises:
        ValueError: If a function name is present without a package.
    """
    output = output.strip()
    if not output:
        return "", ""

    function_name, sep, package_name = output.partition(",")
    if not sep:
        raise ValueError(f"Missing package name in analyzer output: {output!r}")
    return function_name.strip(), package_name.strip()


def analyze(entrypoint: str, fs_path: Path, analyzer: Analyzer) -> HandlerDescriptor:
    """Discover the exported handler in an entrypoint.

    Args:
        entrypoint: Logical path, used for diagnostics.
        fs_path: On-disk path of the entrypoint.
        analyzer: Callable returning the raw analyzer output.

    Returns:
        HandlerDescriptor for the exported function.

    Raises:
        AnalysisError: If the analyzer fails or its output is malformed.
        NoHandlerFoundError: If no exported function was found.
    """
    logger.info('Parsing AST for "%s"', entrypoint)
    try:
        output = analyzer(fs_path)
        function_name, package_name = parse_analyzer_output(output)
    except Exception as e:
        logger.error('Failed to parse AST for "%s"', entrypoint)
        raise AnalysisError(
            f'Failed to parse AST for "{entrypoint}": {e}',
            entrypoint=entrypoint,
        ) from e

    if not function_name:
        err = NoHandlerFoundError(entrypoint)
        logger.error("%s", err)
        raise err

    if not package_name:
        raise AnalysisError(
            f'Analyzer reported no package for "{entrypoint}"',
            entrypoint=entrypoint,
        )

    logger.info('Found exported function "%s" in "%s"', function_name, entrypoint)
    return HandlerDescriptor(function_name=function_name, package_name=package_name)


__all__ = [
    "Analyzer",
    "ExternalAnalyzer",
    "analyze",
    "parse_analyzer_output",
]
