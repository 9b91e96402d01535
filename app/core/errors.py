# app/core/errors.py
"""
Domain errors raised by the order workflow.

Each error carries the HTTP status and the message shown to the client.
`app.main` renders them as ``{"message": ...}`` bodies.
"""

from fastapi import status


class StoreError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidGuestContact(StoreError):
    """Guest checkout without a usable name/email."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid guest contact information"


class InvalidOrderItems(StoreError):
    """Empty item list, non-positive quantity, negative price or unknown product."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid order items"


class CustomerNotFound(StoreError):
    """
    Authenticated account without a customer profile.

    Raised instead of auto-provisioning so that a broken registration
    shows up rather than being papered over.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Customer profile not found"


class InsufficientStock(StoreError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Insufficient stock"


class PersistenceFailure(StoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Could not save the order"
