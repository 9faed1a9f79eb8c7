# ledger/services/settlements.py
# -----------------------------------------------------------------------------
# ЧЕРНОВИК ПОГАШЕНИЯ (settle-up с одним человеком в одной валюте)
# -----------------------------------------------------------------------------
# Направление берём из знака остатка в выбранной валюте:
#   остаток > 0: он должен мне → платит он;
#   остаток < 0: я должен ему  → плачу я.
# amount=None: погасить весь остаток (is_full_settlement=True),
# иначе частичное погашение: 0 < amount <= |остаток| (+0.001 на округление),
# и после округления до decimals сумма остаётся положительной.
# Погашение не меняет ничего задним числом: это новая запись, которую
# сохраняет слой хранения.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ledger.exceptions import SettlementError
from ledger.schemas.settlement import SettlementCreate
from ledger.utils.currency_balance import CurrencyBalance
from ledger.utils.money import D, MONEY_TOLERANCE, NET_EPSILON, normalize_currency, round_money

log = logging.getLogger(__name__)


def is_valid_settlement_amount(amount, outstanding) -> bool:
    amount = D(amount)
    return NET_EPSILON < amount <= abs(D(outstanding)) + NET_EPSILON


def draft_settlement(
    balance: CurrencyBalance,
    currency_code: str,
    *,
    current_user_id: int,
    person_id: int,
    amount: Optional[Decimal] = None,
    note: Optional[str] = None,
    date: Optional[datetime] = None,
    decimals: int = 2,
) -> SettlementCreate:
    if person_id == current_user_id:
        raise SettlementError("Cannot settle with yourself")

    code = normalize_currency(currency_code)
    outstanding = balance.get(code)
    if abs(outstanding) < MONEY_TOLERANCE:
        raise SettlementError(f"Nothing to settle in {code}")

    if amount is None:
        value = round_money(abs(outstanding), decimals)
        if value <= 0:
            raise SettlementError(f"Nothing to settle in {code}")
        is_full = True
    else:
        if not is_valid_settlement_amount(amount, outstanding):
            if D(amount) <= NET_EPSILON:
                raise SettlementError("Settlement amount must be greater than zero")
            raise SettlementError("Settlement amount cannot exceed the outstanding balance")
        value = round_money(amount, decimals)
        if value <= 0:
            raise SettlementError("Settlement amount must be greater than zero")
        if value > round_money(abs(outstanding), decimals):
            raise SettlementError("Settlement amount cannot exceed the outstanding balance")
        is_full = False

    if outstanding > 0:
        from_id, to_id = person_id, current_user_id
    else:
        from_id, to_id = current_user_id, person_id

    log.debug("settlement draft: %s -> %s %s %s (full=%s)", from_id, to_id, value, code, is_full)
    return SettlementCreate(
        from_person_id=from_id,
        to_person_id=to_id,
        amount=value,
        currency_code=code,
        date=date or datetime.utcnow(),
        note=(note or "").strip() or None,
        is_full_settlement=is_full,
    )
