"""API error mapping

Use-case errors travel as ``libs.result.Error``; routes raise ClientError
and the handler renders ``{"error": {...}}`` with the chosen status code.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from libs.result import Error

ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "CONFIGURATION_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "UNAUTHENTICATED": status.HTTP_401_UNAUTHORIZED,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def status_for(error: Error) -> int:
    if error.code in ERROR_STATUS:
        return ERROR_STATUS[error.code]
    if error.code.endswith("_FAILED"):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def raise_for_error(error: Error):
    raise ClientError(error, status_code=status_for(error))


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error.to_dict()})
