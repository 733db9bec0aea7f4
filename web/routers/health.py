"""Health check endpoints."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Any

from fastapi import APIRouter

from go_lambda_builder import __version__
from go_lambda_builder.builds.toolchain import GoToolchain, ToolchainError
from go_lambda_builder.config import Settings, get_settings
from go_lambda_builder.types import HANDLER_NAME, RUNTIME

logger = logging.getLogger(__name__)

router = APIRouter()


def go_version(settings: Settings) -> str | None:
    """Ask the configured Go toolchain for its version.

    Returns:
        The `go version` line, or None if go is missing or fails.
    """
    if shutil.which(settings.go_bin) is None:
        return None
    scratch = Path(tempfile.gettempdir())
    toolchain = GoToolchain(
        gopath=scratch,
        cwd=scratch,
        goos=settings.goos,
        goarch=settings.goarch,
        go_bin=settings.go_bin,
        timeout=settings.analyze_timeout,
    )
    try:
        return toolchain.version()
    except ToolchainError as e:
        logger.warning("Could not determine Go version: %s", e)
        return None


@router.get("/health")
def health() -> dict[str, Any]:
    """Health check endpoint.

    Reports whether the configured Go toolchain and analyzer resolve on
    PATH, and which Go version is installed. Package-main handlers need
    `go get` in GOPATH mode, which Go 1.22 removed.

    Returns:
        Health status with version and tool availability.
    """
    settings = get_settings()
    return {
        "status": "ok",
        "version": __version__,
        "tools": {
            "go": shutil.which(settings.go_bin) is not None,
            "analyzer": shutil.which(settings.analyzer_bin) is not None,
        },
        "go_version": go_version(settings),
    }


@router.get("/")
def root() -> dict[str, str]:
    """Root endpoint.

    Returns:
        API name, version, and the Lambda handler/runtime it produces.
    """
    return {
        "name": "Go Lambda Builder API",
        "version": __version__,
        "handler": HANDLER_NAME,
        "runtime": RUNTIME,
    }
