from fastapi import status


class ServiceError(Exception):
    """Base error raised by the service layer.

    Carries a human-readable message and the HTTP status the request layer
    should answer with.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(ServiceError, ValueError):
    """Malformed or missing input: coordinates, customer name, menu items."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(ServiceError, LookupError):
    """Referenced truck, order or menu version does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageFailure(ServiceError):
    """Query or transaction failure at the persistence boundary."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
