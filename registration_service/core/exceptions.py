from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """
    Base for errors surfaced to API callers as {"category": ..., "message": ...}.
    Raised from services and clients the same way a plain HTTPException would be.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    category: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    category = "NOT_FOUND"


class PasswordIncorrectError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    category = "BAD_REQUEST"


class ValidationFailedError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    category = "BAD_REQUEST"


class NotAuthorizedError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    category = "FORBIDDEN"


class ConflictingStateError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    category = "CONFLICT"


class UpstreamUnavailableError(ServiceError):
    status_code = status.HTTP_502_BAD_GATEWAY
    category = "UPSTREAM_UNAVAILABLE"
