"""Build endpoints.

- POST /builds - Build a Lambda from a request body

Request files must carry inline data; local paths and URLs are rejected
with 422.
"""

import base64
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi import status as http_status

from go_lambda_builder.builds.schema import InlineBuildRequestSchema
from go_lambda_builder.builds.service import build_request, describe_failure
from go_lambda_builder.config import get_settings
from go_lambda_builder.errors import BuilderError

router = APIRouter()


@router.post("")
def create_build(
    request: InlineBuildRequestSchema,
    include_zip: bool = Query(False, description="Include the zip as base64"),
) -> dict[str, Any]:
    """Build a Lambda artifact.

    Args:
        request: Build request body.
        include_zip: Include the zipped artifact in the response.

    Returns:
        Artifact summary for the entrypoint.
    """
    settings = get_settings()

    try:
        artifacts = build_request(request, settings=settings)
    except BuilderError as e:
        result = describe_failure(e)
        raise HTTPException(
            status_code=http_status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "code": result.code,
                "message": result.message,
                "details": result.details,
            },
        ) from None

    artifact = artifacts[request.entrypoint]
    response: dict[str, Any] = {"entrypoint": request.entrypoint}
    response.update(artifact.summary())

    if include_zip:
        response["zip_base64"] = base64.b64encode(artifact.to_zip()).decode("ascii")

    return response
