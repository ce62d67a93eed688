"""
Failure classification for storefront operations.

Every user-visible failure is raised as a `KnownError` subclass and
translated into a `FailureDetail` body by the API exception handler.

Error taxonomy:
- Validation: missing checkout fields, bad signup input. No writes happen.
- Backend: the hosted backend rejected a request or was unreachable.
- Checkout: a step of the order write sequence failed. Not retried.
- Auth/permission: missing session or non-admin caller.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    EMPTY_CART = "empty_cart"

    # Resource failures
    NOT_FOUND = "not_found"

    # Access failures
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"

    # Service failures
    CHECKOUT_FAILED = "checkout_failed"
    EXTERNAL_API_ERROR = "external_api_error"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class FailureResponse(BaseModel):
    """Response body for every failed request."""

    failure: FailureDetail


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> FailureResponse:
        """Convert to a response body."""
        return FailureResponse(
            failure=FailureDetail(
                kind=self.kind,
                message=self.message,
                detail=self.detail,
                suggestion=self.suggestion,
            )
        )


class BackendError(KnownError):
    """
    The hosted backend rejected a request or could not be reached.

    `code` carries the backend's own error code when it sent one
    (e.g. "23505" for a unique violation).
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        payload: Any = None,
    ):
        self.status = status
        self.code = code
        self.payload = payload
        super().__init__(
            kind=FailureKind.EXTERNAL_API_ERROR,
            message="The store backend could not complete the request.",
            detail=message,
            suggestion="Please try again in a moment.",
            status_code=502,
        )

    @property
    def is_unique_violation(self) -> bool:
        return self.code == "23505" or self.status == 409


class NotFoundError(KnownError):
    """A requested record does not exist."""

    def __init__(self, what: str, key: str):
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{what} '{key}' not found",
            status_code=404,
        )


class AuthError(KnownError):
    """Missing, invalid, or rejected credentials."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.UNAUTHENTICATED,
            message=message,
            detail=detail,
            status_code=401,
        )


class PermissionDeniedError(KnownError):
    """Authenticated caller lacks the admin role."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.FORBIDDEN,
            message="Admin access required",
            status_code=403,
        )


class InvalidInputError(KnownError):
    """Request input failed a business rule."""

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            suggestion=suggestion,
            status_code=400,
        )


class CheckoutValidationError(KnownError):
    """
    Checkout form is missing required fields.

    Raised before any write; one aggregate message for all missing fields.
    """

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            kind=FailureKind.MISSING_REQUIRED,
            message="Please fill in all required fields",
            detail=", ".join(missing),
            status_code=400,
        )


class EmptyCartError(KnownError):
    """Checkout attempted with nothing in the cart."""

    def __init__(self) -> None:
        super().__init__(
            kind=FailureKind.EMPTY_CART,
            message="Your cart is empty",
            suggestion="Add some cards before checking out!",
            status_code=400,
        )


class CheckoutError(KnownError):
    """
    A step of the order write sequence failed.

    Steps completed before the failure are NOT rolled back unless
    compensation is enabled in settings.
    """

    def __init__(self, step: str, cause: Exception | None = None):
        self.step = step
        self.cause = cause
        super().__init__(
            kind=FailureKind.CHECKOUT_FAILED,
            message="There was an error processing your order. Please try again.",
            detail=f"failed at step: {step}",
            status_code=502,
        )
