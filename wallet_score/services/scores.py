from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wallet_score.core.errors import StoreFailureError, WalletNotFoundError
from wallet_score.core.logging import get_logger
from wallet_score.core.metrics import inc_counter
from wallet_score.db.repositories import WalletScoreRepository

logger = get_logger("wallet_score.services.scores", component="service")


@contextmanager
def _store_errors(db: Session, *, operation: str, wallet: str) -> Iterator[None]:
    """Turn driver/pool failures into ``StoreFailureError`` after rolling back."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        inc_counter("scores.store_failures")
        logger.exception(
            "score_store_failure",
            extra={"structured_data": {"operation": operation, "wallet": wallet}},
        )
        raise StoreFailureError(detail=str(exc)) from exc


def get_wallet_score(db: Session, wallet: str) -> float:
    """Return the stored score for ``wallet``.

    Raises ``WalletNotFoundError`` when the wallet was never written; callers
    treat that as a score of zero.
    """
    with _store_errors(db, operation="get", wallet=wallet):
        score = WalletScoreRepository(db).get_score(wallet)
    if score is None:
        inc_counter("scores.get.miss")
        logger.info("score_not_found", extra={"structured_data": {"wallet": wallet}})
        raise WalletNotFoundError(wallet)
    inc_counter("scores.get.hit")
    return score


def update_wallet_score(db: Session, wallet: str, score: float) -> float:
    """Upsert ``score`` for ``wallet`` and commit; returns the stored value."""
    inc_counter("scores.update.total")
    logger.info("score_update_requested", extra={"structured_data": {"wallet": wallet, "score": score}})
    with _store_errors(db, operation="update", wallet=wallet):
        stored = WalletScoreRepository(db).upsert_score(wallet, score)
        db.commit()
    return stored
