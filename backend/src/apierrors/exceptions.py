"""Domain exceptions raised by services and translated at the HTTP boundary.

Services raise these to signal business-rule violations. The routing table
in routing.py maps each class to an ErrorKind; handlers.py turns that into
the error body and status code.
"""


class DomainError(Exception):
    """Base class for all domain exceptions."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class ConflictError(DomainError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""


class ConstraintViolationError(DomainError):
    """Raised when input passes schema validation but breaks a business rule."""


class AccessDeniedError(DomainError):
    """Raised when the caller is authenticated but not allowed to act."""

    def __init__(self, message: str = "Access is denied") -> None:
        super().__init__(message)


class UnsupportedMediaTypeError(DomainError):
    """Raised when a request body arrives in a media type the endpoint can't read."""

    def __init__(self, media_type: str | None) -> None:
        self.media_type = media_type
        super().__init__(f"Content type '{media_type or ''}' not supported")
