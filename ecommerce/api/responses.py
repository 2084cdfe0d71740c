"""Translate Result variants into HTTP responses."""

from typing import Any, Dict

from fastapi import Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..domain.result import Result, ResultStatus

STATUS_CODES: Dict[ResultStatus, int] = {
    ResultStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ResultStatus.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ResultStatus.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ResultStatus.CONFLICT: status.HTTP_409_CONFLICT,
    ResultStatus.INVALID: status.HTTP_400_BAD_REQUEST,
    ResultStatus.ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
}

DEFAULT_DETAILS: Dict[ResultStatus, str] = {
    ResultStatus.NOT_FOUND: "Not found",
    ResultStatus.UNAUTHORIZED: "Unauthorized",
    ResultStatus.FORBIDDEN: "Forbidden",
    ResultStatus.CONFLICT: "Conflict",
    ResultStatus.ERROR: "Error",
}


def failure_body(result: Result) -> Dict[str, Any]:
    if result.status is ResultStatus.INVALID:
        return {"errors": [error.model_dump() for error in result.validation_errors]}
    return {"detail": result.message or DEFAULT_DETAILS[result.status]}


def to_response(result: Result, success_status: int = status.HTTP_200_OK) -> Response:
    """
    Build the HTTP response for a dispatched request.

    Args:
        result: Outcome returned by the pipeline
        success_status: Status code used for Success

    Returns:
        JSON response, or an empty 204 response
    """
    if not result.is_success:
        return JSONResponse(status_code=STATUS_CODES[result.status], content=failure_body(result))

    if success_status == status.HTTP_204_NO_CONTENT:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(status_code=success_status, content=jsonable_encoder(result.value))


def to_created_response(result: Result) -> Response:
    """201 with the new resource id for create commands."""
    if not result.is_success:
        return to_response(result)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content={"id": str(result.value)})
