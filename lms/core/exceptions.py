from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base class for domain errors; rendered by the global exception handler."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "BAD_REQUEST"

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class NotFoundError(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"


class ForbiddenError(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"


class NotEnrolledError(ForbiddenError):
    error_code = "NOT_ENROLLED"

    def __init__(self, detail: str = "You are not enrolled in this course"):
        super().__init__(detail)


class ValidationFailure(AppException):
    error_code = "VALIDATION_FAILURE"


class AttemptLimitExceeded(AppException):
    error_code = "ATTEMPT_LIMIT_EXCEEDED"

    def __init__(self, attempts_allowed: int):
        self.attempts_allowed = attempts_allowed
        super().__init__(f"Maximum attempts ({attempts_allowed}) reached")


class SubmissionClosedError(AppException):
    error_code = "SUBMISSION_CLOSED"


class ConflictError(AppException):
    status_code = status.HTTP_409_CONFLICT
    error_code = "CONFLICT"
