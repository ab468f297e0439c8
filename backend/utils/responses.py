from typing import Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from schemas.result import Err, ErrorKind, Ok

# HTTP status for each kind of failure
FAILURE_STATUS = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_response(result, *, success_status: int = status.HTTP_200_OK,
                headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Serialise an Ok/Err envelope with the status code it stands for."""
    if isinstance(result, Ok):
        return JSONResponse(status_code=success_status, content=result.model_dump(mode="json"), headers=headers)
    return JSONResponse(status_code=FAILURE_STATUS[result.kind], content=result.model_dump(mode="json"))


def error_response(status_code: int, message: str, errors) -> JSONResponse:
    body = Err(message=message, errors=list(errors))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
