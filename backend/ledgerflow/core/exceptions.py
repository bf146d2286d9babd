"""
Ledger exceptions and their HTTP translation.

All ledger failures are local and recoverable: the operation that raised
has not changed any state, and the caller decides what to show.

    NotFound           referenced id does not exist
    ValidationError    required input missing or malformed
    UnsupportedFormat  report requested in a format the renderer cannot emit
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for every failure the ledger core raises."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LedgerError):
    def __init__(self, resource: str, resource_id=None):
        self.resource = resource
        self.resource_id = resource_id
        if resource_id is None:
            super().__init__(f"{resource} not found")
        else:
            super().__init__(f"{resource} {resource_id} not found")


class ValidationError(LedgerError):
    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnsupportedFormat(LedgerError):
    def __init__(self, requested: str, supported: str):
        self.requested = requested
        self.supported = supported
        super().__init__(f"Unsupported report format '{requested}' (supported: {supported})")


class BusinessError:
    """Translate ledger failures into HTTP responses for the API layer."""

    @staticmethod
    def not_found(detail: str) -> HTTPException:
        logger.info(f"Not found: {detail}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """
        400 for input validation errors.

        OK to include specific details here since the caller caused the issue.
        Examples: "amount is required", "amount must be positive"
        """
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def unsupported_media(detail: str) -> HTTPException:
        logger.info(f"Unsupported format: {detail}")
        return HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=detail,
        )

    @staticmethod
    def server_error(original_error: Exception = None) -> HTTPException:
        """
        Generic 500 - logs actual error internally, hides it from the caller.
        """
        if original_error:
            logger.error(
                f"Internal server error: {type(original_error).__name__}: {str(original_error)}",
                exc_info=True
            )
        else:
            logger.error("Internal server error occurred", exc_info=True)

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred. Please try again later.",
        )

    @staticmethod
    def from_ledger_error(error: LedgerError) -> HTTPException:
        if isinstance(error, NotFound):
            return BusinessError.not_found(error.message)
        if isinstance(error, ValidationError):
            return BusinessError.bad_request(error.message)
        if isinstance(error, UnsupportedFormat):
            return BusinessError.unsupported_media(error.message)
        return BusinessError.server_error(error)
