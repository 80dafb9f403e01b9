"""Domain error codes shared by the catalog, cart and orders apps."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    INFRASTRUCTURE = "INFRASTRUCTURE"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised for caller-correctable input problems.

    Empty carts, bad quantities, illegal status transitions and items that are
    no longer purchasable all end up here.
    """

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message)


class NotFoundError(DomainError):
    """Raised when a referenced user, cart item, catalog item or order does not exist."""

    def __init__(self, resource: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=f"{resource} not found")
        self.resource = resource


class ConflictError(DomainError):
    """Raised when an idempotency guard fires."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message)


class ForbiddenError(DomainError):
    """Raised when a user asks for an order they do not own."""

    def __init__(self, message: str = "You do not have permission to access this order") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class InfrastructureError(DomainError):
    """Raised when the relational or cache store fails for non-business reasons."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(code=ErrorCode.INFRASTRUCTURE, message=message)
