from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import func, select

from wallet_score.db.database import SessionLocal, get_db
from wallet_score.db.repositories import WalletScoreRepository
from wallet_score.models import User
from wallet_score.services.scores import update_wallet_score


def test_repository_get_and_upsert(session, wallet):
    repo = WalletScoreRepository(session)
    assert repo.get_score(wallet) is None

    assert repo.upsert_score(wallet, 5) == 5
    assert repo.upsert_score(wallet, 8.5) == 8.5
    session.commit()

    assert repo.get_score(wallet) == 8.5


def test_concurrent_updates_keep_single_row(db_setup, wallet):
    scores = list(range(1, 17))

    def write(score: int) -> float:
        # same session lifecycle as a request: one pooled session from get_db per call
        gen = get_db()
        db = next(gen)
        try:
            return update_wallet_score(db, wallet, score)
        finally:
            gen.close()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(write, scores))

    assert sorted(results) == scores
    with SessionLocal() as db:
        count = db.execute(
            select(func.count()).select_from(User).where(User.wallet_address == wallet)
        ).scalar_one()
        final = WalletScoreRepository(db).get_score(wallet)
    assert count == 1
    assert final in scores
