# ledger/routers/settlements.py
# -----------------------------------------------------------------------------
# РОУТЕР: Погашения (черновик settle-up)
# -----------------------------------------------------------------------------
# Считаем текущий остаток с человеком по присланным записям и собираем
# запись погашения. Сохраняет её внешний слой (здесь хранения нет).
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ledger import config
from ledger.exceptions import SettlementError
from ledger.schemas.settlement import SettlementCreate, SettlementDraftIn
from ledger.services.balances import person_balance
from ledger.services.settlements import draft_settlement

router = APIRouter(prefix="/settlements")


@router.post("/draft", response_model=SettlementCreate)
def create_settlement_draft(payload: SettlementDraftIn):
    balance = person_balance(
        payload.transactions,
        payload.settlements,
        current_user_id=payload.current_user_id,
        person_id=payload.person_id,
    )
    try:
        return draft_settlement(
            balance,
            payload.currency_code,
            current_user_id=payload.current_user_id,
            person_id=payload.person_id,
            amount=payload.amount,
            note=payload.note,
            decimals=config.decimals_for(payload.currency_code),
        )
    except SettlementError as e:
        raise HTTPException(status_code=422, detail=e.detail)
