from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from wallet_score.db.database import get_db
from wallet_score.schemas.score import (
    ErrorOut,
    ScoreOut,
    ScoreUpdateOut,
    ScoreUpdateRequest,
    check_wallet,
)
from wallet_score.services.scores import get_wallet_score, update_wallet_score

router = APIRouter(tags=["score"])

_ERROR_RESPONSES = {
    400: {"model": ErrorOut, "description": "Invalid wallet or score"},
    500: {"model": ErrorOut, "description": "Store failure"},
}


@router.get(
    "/get-score",
    response_model=ScoreOut,
    responses={**_ERROR_RESPONSES, 404: {"model": ErrorOut, "description": "No score yet, start from 0"}},
)
def get_score(
    wallet: Optional[str] = Query(default=None, description="Wallet address"),
    db: Session = Depends(get_db),
) -> ScoreOut:
    address = check_wallet(wallet)
    return ScoreOut(wallet=address, score=get_wallet_score(db, address))


@router.post("/update-score", response_model=ScoreUpdateOut, responses=_ERROR_RESPONSES)
def update_score(payload: ScoreUpdateRequest, db: Session = Depends(get_db)) -> ScoreUpdateOut:
    stored = update_wallet_score(db, payload.wallet, payload.score)
    return ScoreUpdateOut(wallet=payload.wallet, new_score=stored)
