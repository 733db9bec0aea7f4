"""Configuration endpoints."""

from typing import Any

from fastapi import APIRouter

from go_lambda_builder.config import get_settings

router = APIRouter()


@router.get("")
def get_config() -> dict[str, Any]:
    """Get effective configuration.

    Returns:
        Current configuration as JSON.
    """
    settings = get_settings()
    return {
        "go_bin": settings.go_bin,
        "analyzer_bin": settings.analyzer_bin,
        "goos": settings.goos,
        "goarch": settings.goarch,
        "ldflags": settings.ldflags,
        "tmp_dir": str(settings.tmp_dir) if settings.tmp_dir else None,
        "log_level": settings.log_level,
        "analyze_timeout": settings.analyze_timeout,
        "build_timeout": settings.build_timeout,
        "download_timeout": settings.download_timeout,
        "max_lambda_size": settings.max_lambda_size,
    }
