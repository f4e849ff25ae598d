"""HTTP error envelope shared by the routers."""

from fastapi import HTTPException, status

from folio.services.mutations import MutationFailure
from folio.services.results import Err, Ok, Result
from folio.services.storage import StorageError

FAILURE_STATUS = {
    "validation": (status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR"),
    "not_found": (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    "conflict": (status.HTTP_409_CONFLICT, "CONFLICT"),
    "unauthenticated": (status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED"),
    "store": (status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_ERROR"),
}


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
            }
        },
    )


def not_found(message: str) -> HTTPException:
    return api_error(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message)


def failure_error(failure: MutationFailure) -> HTTPException:
    status_code, code = FAILURE_STATUS[failure.kind]
    return api_error(status_code, code, failure.message)


def storage_error(exc: StorageError) -> HTTPException:
    if exc.code == "invalid":
        return api_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", exc.message)
    return api_error(status.HTTP_503_SERVICE_UNAVAILABLE, "STORAGE_ERROR", exc.message)


def unwrap(result: Result):
    """Return an Ok's value or raise the HTTP error for an Err."""
    if isinstance(result, Err):
        raise failure_error(result.reason)
    if not isinstance(result, Ok):
        raise TypeError(f"Expected a Result, got {type(result).__name__}")
    return result.value
