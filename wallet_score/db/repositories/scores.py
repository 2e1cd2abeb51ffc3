from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from wallet_score.core.metrics import measure_time
from wallet_score.models.user import User

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class WalletScoreRepository:
    """Score lookups and upserts against the ``users`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @measure_time("db.scores.get")
    def get_score(self, wallet: str) -> Optional[float]:
        stmt = select(User.score).where(User.wallet_address == wallet)
        return self.db.execute(stmt).scalar_one_or_none()

    @measure_time("db.scores.upsert")
    def upsert_score(self, wallet: str, score: float) -> float:
        """Insert or overwrite the score for ``wallet`` in one statement.

        Returns the score as stored. Concurrent callers for the same wallet
        are serialized by the unique key, so no row is ever duplicated.
        The caller owns the transaction.
        """
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")

        now = datetime.now(timezone.utc)
        stmt = insert(User).values(
            wallet_address=wallet,
            score=score,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[User.wallet_address],
            set_={"score": stmt.excluded.score, "updated_at": stmt.excluded.updated_at},
        ).returning(User.score)
        return self.db.execute(stmt).scalar_one()
