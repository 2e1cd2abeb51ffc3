from __future__ import annotations

"""Domain exception hierarchy for the wallet score service."""

from typing import Any

__all__ = [
    "DomainError",
    "InvalidInputError",
    "InvalidWalletError",
    "InvalidScoreError",
    "NotFoundError",
    "WalletNotFoundError",
    "StoreFailureError",
    "InternalServerError",
]


class DomainError(Exception):
    """Base class for errors that translate into a JSON error response."""

    status_code: int = 400
    error_code: str = "domain_error"
    default_message: str = "Domain error"

    def __init__(
        self,
        message: str | None = None,
        *,
        detail: Any | None = None,
        status_code: int | None = None,
    ) -> None:
        final_message = message or self.default_message
        super().__init__(final_message)
        self.message = final_message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(DomainError, ValueError):
    """Raised when request input is missing or malformed."""

    error_code = "invalid_input"
    default_message = "Invalid request"
    status_code = 400


class InvalidWalletError(InvalidInputError):
    error_code = "invalid_wallet"
    default_message = "Invalid wallet address"


class InvalidScoreError(InvalidInputError):
    error_code = "invalid_score"
    default_message = "Invalid score value"


class NotFoundError(DomainError):
    """Base class for missing resources."""

    error_code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class WalletNotFoundError(NotFoundError):
    """Raised when a wallet has no stored score; callers treat it as score 0."""

    error_code = "wallet_not_found"
    default_message = "User not found"

    def __init__(self, wallet: str) -> None:
        super().__init__(detail={"message": "Starting from score 0"})
        self.wallet = wallet


class StoreFailureError(DomainError):
    """Raised when the relational store rejects or cannot serve a query."""

    error_code = "store_failure"
    status_code = 500
    default_message = "Internal server error"


class InternalServerError(DomainError):
    """Fallback for unexpected failures outside the store layer."""

    error_code = "internal_error"
    status_code = 500
    default_message = "Internal server error"
