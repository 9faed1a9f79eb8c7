# ledger/routers/balances.py
# -----------------------------------------------------------------------------
# РОУТЕР: Балансы
# -----------------------------------------------------------------------------
# Хранения нет: клиент (или слой данных) присылает записи в теле запроса,
# мы пересчитываем и отдаём срез. current_user_id: явное поле запроса.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Iterable, List

from fastapi import APIRouter

from ledger import config
from ledger.schemas.balance import (
    CurrencyBalanceOut,
    GroupBalanceIn,
    GroupBalanceOut,
    MemberBalanceOut,
    PeopleBalancesIn,
    PeopleBalancesOut,
    PersonBalanceIn,
)
from ledger.services.balances import (
    MemberBalance,
    balance_summary,
    group_balance,
    group_member_balances,
    members_who_owe_you,
    members_you_owe,
    people_balances,
    person_balance,
)
from ledger.utils.currency_balance import CurrencyBalance

router = APIRouter(prefix="/balances")

# ===== Вспомогательные =======================================================

def currency_balance_out(balance: CurrencyBalance) -> CurrencyBalanceOut:
    return CurrencyBalanceOut(
        balances=balance.as_dict(config.decimals_for),
        is_settled=balance.is_settled,
        single_currency=balance.single_currency,
        primary_currency=balance.primary_currency(config.DEFAULT_CURRENCY),
        has_positive=balance.has_positive,
        has_negative=balance.has_negative,
    )


def member_balances_out(entries: Iterable[MemberBalance]) -> List[MemberBalanceOut]:
    return [MemberBalanceOut(person=e.person, balance=currency_balance_out(e.balance)) for e in entries]


# ===== Ручки =================================================================

@router.post("/person", response_model=CurrencyBalanceOut)
def get_person_balance(payload: PersonBalanceIn):
    """Баланс с одним человеком: взаимные транзакции + прямые погашения."""
    balance = person_balance(
        payload.transactions,
        payload.settlements,
        current_user_id=payload.current_user_id,
        person_id=payload.person_id,
    )
    return currency_balance_out(balance)


@router.post("/group", response_model=GroupBalanceOut)
def get_group_balance(payload: GroupBalanceIn):
    entries = group_member_balances(
        payload.group,
        payload.people,
        payload.transactions,
        current_user_id=payload.current_user_id,
    )
    total = group_balance(payload.group, payload.transactions, current_user_id=payload.current_user_id)
    return GroupBalanceOut(
        total=currency_balance_out(total),
        members=member_balances_out(entries),
        owe_you=member_balances_out(members_who_owe_you(entries)),
        you_owe=member_balances_out(members_you_owe(entries)),
    )


@router.post("/people", response_model=PeopleBalancesOut)
def get_people_balances(payload: PeopleBalancesIn):
    entries = people_balances(
        payload.people,
        payload.transactions,
        payload.settlements,
        current_user_id=payload.current_user_id,
    )
    summary = balance_summary(entries)
    return PeopleBalancesOut(
        people=member_balances_out(entries),
        owed_to_you=summary.owed_to_you.as_dict(config.decimals_for),
        you_owe=summary.you_owe.as_dict(config.decimals_for),
    )
