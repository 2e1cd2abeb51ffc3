from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wallet_score.core.errors import InvalidScoreError, InvalidWalletError

__all__ = [
    "MIN_WALLET_LENGTH",
    "check_wallet",
    "check_score",
    "ScoreUpdateRequest",
    "ScoreOut",
    "ScoreUpdateOut",
    "HealthOut",
    "ErrorOut",
]

MIN_WALLET_LENGTH = 10


def check_wallet(value: object) -> str:
    """Return ``value`` if it is a usable wallet address, else raise ``InvalidWalletError``.

    Addresses are opaque keys: only type and length are checked, nothing is
    stripped or case-folded.
    """
    if not isinstance(value, str) or len(value) < MIN_WALLET_LENGTH:
        raise InvalidWalletError(
            detail=f"Wallet address must be a string of at least {MIN_WALLET_LENGTH} characters"
        )
    return value


def check_score(value: object) -> float:
    """Accept JSON numbers only: no numeric strings, no booleans, no NaN or negatives."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScoreError(detail="Score must be a number")
    try:
        number = float(value)
    except OverflowError:
        # integers past the float range cannot be stored in a float column
        raise InvalidScoreError(detail="Score must be a finite number") from None
    if not math.isfinite(number) or number < 0:
        raise InvalidScoreError(detail="Score must be a positive number")
    return value


class ScoreUpdateRequest(BaseModel):
    wallet: str = Field(description="Wallet address, at least 10 characters")
    score: float = Field(description="Non-negative score to store")

    @field_validator("wallet", mode="before")
    @classmethod
    def _validate_wallet(cls, value: object) -> str:
        return check_wallet(value)

    @field_validator("score", mode="before")
    @classmethod
    def _validate_score(cls, value: object) -> float:
        return check_score(value)


class ScoreOut(BaseModel):
    success: bool = True
    wallet: str
    score: float


class ScoreUpdateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    wallet: str
    new_score: float = Field(alias="newScore")
    message: str = "Score updated successfully"


class HealthOut(BaseModel):
    status: str = "healthy"
    timestamp: datetime
    started_at: datetime
    uptime_seconds: float


class ErrorOut(BaseModel):
    success: bool = False
    error: str
    code: str
    message: Optional[str] = None
    details: Optional[str] = None
    correlation_id: Optional[str] = None
