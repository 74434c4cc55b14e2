"""
Module: errors.py
Description: Mapping from storage failures to HTTP errors.

NotFound and InvalidProperty are client errors, Forbidden is an
authorization error and StoreUnavailable is a server fault.
"""

from fastapi import HTTPException
from fastapi import status as status_codes

from qanda.storage.errors import ErrorCode, StoreError
from qanda.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: status_codes.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_PROPERTY: status_codes.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status_codes.HTTP_403_FORBIDDEN,
    ErrorCode.STORE_UNAVAILABLE: status_codes.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(exc: StoreError) -> HTTPException:
    """
    Convert a storage error into the HTTPException the route should raise.

    Server faults get a generic message; the detail was already logged by
    the backend together with the ids involved.
    """
    status_code = STATUS_BY_CODE.get(exc.code, status_codes.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error("Storage failure surfaced to client", error_code=exc.code.value, error=str(exc))
        return HTTPException(status_code=status_code, detail="Storage temporarily unavailable")

    return HTTPException(status_code=status_code, detail=exc.message)
