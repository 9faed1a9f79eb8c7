# ledger/routers/splits.py
# -----------------------------------------------------------------------------
# РОУТЕР: Деление суммы
# -----------------------------------------------------------------------------
#   • /preview : пересчёт на каждое изменение формы; никогда не 422 по сумме,
#                 только is_valid + message.
#   • /finalize: записи для сохранения; невалидный ввод → 422.
# Точность: по decimals валюты транзакции.
# -----------------------------------------------------------------------------

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ledger import config
from ledger.exceptions import SplitValidationError
from ledger.schemas.person import Person
from ledger.schemas.split import SplitFinalizeIn, SplitFinalizeOut, SplitPreviewIn, SplitPreviewOut
from ledger.services.splits import build_payer_contributions, finalize_splits, primary_payer
from ledger.utils.splits import calculate_splits
from ledger.utils.validation import remaining_amount, validation_message

router = APIRouter(prefix="/splits")


@router.post("/preview", response_model=SplitPreviewOut)
def preview_split(payload: SplitPreviewIn):
    decimals = config.decimals_for(payload.currency_code)
    details = calculate_splits(
        payload.amount,
        payload.participants,
        payload.method,
        payload.inputs,
        current_user_id=payload.current_user_id,
        decimals=decimals,
    )
    message = validation_message(
        payload.amount,
        payload.participants,
        payload.method,
        payload.inputs,
        [p.amount for p in payload.payers],
        current_user_id=payload.current_user_id,
        decimals=decimals,
    )
    return SplitPreviewOut(
        details=details,
        is_valid=message is None,
        message=message,
        remaining=remaining_amount(payload.amount, details),
    )


@router.post("/finalize", response_model=SplitFinalizeOut)
def finalize_split(payload: SplitFinalizeIn):
    if payload.current_user_id is None:
        raise HTTPException(
            status_code=422,
            detail="current_user_id is required to finalize a split",
        )

    decimals = config.decimals_for(payload.currency_code)
    payer_amounts = {p.person_id: p.amount for p in payload.payers}
    try:
        splits = finalize_splits(
            payload.transaction_id,
            payload.amount,
            payload.participants,
            payload.method,
            payload.inputs,
            list(payer_amounts.values()),
            current_user_id=payload.current_user_id,
            decimals=decimals,
        )
        payers = build_payer_contributions(
            payload.transaction_id,
            payload.amount,
            payer_amounts,
            current_user_id=payload.current_user_id,
            decimals=decimals,
        )
    except SplitValidationError as e:
        raise HTTPException(status_code=422, detail=e.detail)

    # имена плательщиков: из списка участников (плательщик всегда участник формы)
    by_id = {p.id: p for p in payload.participants}
    payer_people = [by_id.get(pid) or Person(id=pid) for pid in payer_amounts]
    return SplitFinalizeOut(
        splits=splits,
        payers=payers,
        payer=primary_payer(payer_people, current_user_id=payload.current_user_id),
    )
