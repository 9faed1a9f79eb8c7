# ledger/services/balances.py
# -----------------------------------------------------------------------------
# АГРЕГАЦИЯ БАЛАНСОВ: человек ↔ человек, группа, списки участников
# -----------------------------------------------------------------------------
# Политика:
#   • Всё пересчитывается на каждый вызов, без кэша: транзакции могут меняться
#     между чтениями, а корректность важнее скорости.
#   • current_user_id: всегда явный параметр, никаких глобальных «я».
#   • Баланс человека: все взаимные транзакции (оба участвуют как плательщик,
#     участник или вкладчик) + погашения СТРОГО между этими двумя людьми.
#   • Баланс группы: только транзакции с group_id группы, по каждому участнику
#     кроме меня. Погашения к группе не привязаны: в групповой баланс не входят.
#   • Знак: плюс значит мне должны, минус значит я должен. Валюты не смешиваются.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, NamedTuple, Sequence

from ledger.schemas.person import Group, Person, display_order_key
from ledger.schemas.settlement import Settlement
from ledger.schemas.transaction import Transaction
from ledger.utils.balance import net_positions, pairwise_from_positions, participant_ids, payer_ids
from ledger.utils.currency_balance import CurrencyBalance

log = logging.getLogger(__name__)


class MemberBalance(NamedTuple):
    person: Person
    balance: CurrencyBalance


class BalanceSummary(NamedTuple):
    owed_to_you: CurrencyBalance
    you_owe: CurrencyBalance


# =========================
# ФИЛЬТРЫ
# =========================

def is_involved(tx: Transaction, person_id: int, current_user_id: int) -> bool:
    """Плательщик, вкладчик (multi-payer) или участник деления."""
    return person_id in payer_ids(tx, current_user_id) or person_id in participant_ids(tx)


def mutual_transactions(
    transactions: Iterable[Transaction],
    *,
    current_user_id: int,
    person_id: int,
) -> List[Transaction]:
    """Транзакции, где участвуем и я, и person_id; сначала новые."""
    mutual = [
        tx
        for tx in transactions
        if is_involved(tx, current_user_id, current_user_id) and is_involved(tx, person_id, current_user_id)
    ]
    return sorted(mutual, key=lambda tx: (tx.date, tx.id), reverse=True)


def settlements_between(settlements: Iterable[Settlement], a: int, b: int) -> List[Settlement]:
    """Только прямые погашения a↔b; «соседние» погашения с другими людьми не берём."""
    if a == b:
        return []
    return [s for s in settlements if {s.from_person_id, s.to_person_id} == {a, b}]


def group_transactions(group: Group, transactions: Iterable[Transaction]) -> List[Transaction]:
    return [tx for tx in transactions if tx.group_id == group.id]


# =========================
# ЧЕЛОВЕК ↔ ЧЕЛОВЕК
# =========================

def apply_settlements(
    balance: CurrencyBalance,
    settlements: Iterable[Settlement],
    *,
    current_user_id: int,
    person_id: int,
) -> CurrencyBalance:
    for s in settlements_between(settlements, current_user_id, person_id):
        if s.from_person_id == person_id:
            # он заплатил мне: его долг уменьшился
            balance.subtract(s.amount, s.currency_code)
        else:
            # я заплатил ему: мой долг уменьшился
            balance.add(s.amount, s.currency_code)
    return balance


def person_balance(
    transactions: Iterable[Transaction],
    settlements: Iterable[Settlement],
    *,
    current_user_id: int,
    person_id: int,
) -> CurrencyBalance:
    """Сколько person_id должен мне, по валютам (плюс значит должен мне)."""
    balance = CurrencyBalance()
    if person_id == current_user_id:
        return balance

    for tx in mutual_transactions(transactions, current_user_id=current_user_id, person_id=person_id):
        net = net_positions(tx, current_user_id)
        balance.add(pairwise_from_positions(net, current_user_id, person_id), tx.currency_code)

    return apply_settlements(balance, settlements, current_user_id=current_user_id, person_id=person_id)


def people_balances(
    people: Iterable[Person],
    transactions: Sequence[Transaction],
    settlements: Sequence[Settlement],
    *,
    current_user_id: int,
) -> List[MemberBalance]:
    """Все люди, кроме меня, со своими балансами; по алфавиту."""
    entries = [
        MemberBalance(
            person=p,
            balance=person_balance(transactions, settlements, current_user_id=current_user_id, person_id=p.id),
        )
        for p in people
        if p.id != current_user_id
    ]
    return sorted(entries, key=lambda e: display_order_key(e.person))


def balance_summary(entries: Iterable[MemberBalance]) -> BalanceSummary:
    """
    Сводка по валютам: сколько всего должны мне и сколько должен я.
    Плюсы и минусы разных людей НЕ взаимозачитываются (you_owe: со знаком минус).
    """
    owed_to_you = CurrencyBalance()
    you_owe = CurrencyBalance()
    for entry in entries:
        owed_to_you.merge(entry.balance.positive_part())
        you_owe.merge(entry.balance.negative_part())
    return BalanceSummary(owed_to_you=owed_to_you, you_owe=you_owe)


# =========================
# ГРУППА
# =========================

def group_balance_with_member(
    group: Group,
    transactions: Iterable[Transaction],
    *,
    current_user_id: int,
    member_id: int,
) -> CurrencyBalance:
    """Баланс со участником только по транзакциям группы."""
    balance = CurrencyBalance()
    if member_id == current_user_id:
        return balance
    for tx in group_transactions(group, transactions):
        net = net_positions(tx, current_user_id)
        balance.add(pairwise_from_positions(net, current_user_id, member_id), tx.currency_code)
    return balance


def group_balance(
    group: Group,
    transactions: Iterable[Transaction],
    *,
    current_user_id: int,
) -> CurrencyBalance:
    """Мой итог в группе по валютам (плюс значит участники должны мне)."""
    balance = CurrencyBalance()
    others = [mid for mid in dict.fromkeys(group.member_ids) if mid != current_user_id]
    for tx in group_transactions(group, transactions):
        net = net_positions(tx, current_user_id)
        for mid in others:
            balance.add(pairwise_from_positions(net, current_user_id, mid), tx.currency_code)
    return balance


def group_member_balances(
    group: Group,
    people: Iterable[Person],
    transactions: Sequence[Transaction],
    *,
    current_user_id: int,
) -> List[MemberBalance]:
    """Участники группы (кроме меня) с балансами, по алфавиту."""
    by_id: Dict[int, Person] = {p.id: p for p in people}
    entries: List[MemberBalance] = []
    for mid in dict.fromkeys(group.member_ids):
        if mid == current_user_id:
            continue
        person = by_id.get(mid)
        if person is None:
            log.warning("group %s: member %s has no person record; shown without name", group.id, mid)
            person = Person(id=mid)
        entries.append(
            MemberBalance(
                person=person,
                balance=group_balance_with_member(
                    group, transactions, current_user_id=current_user_id, member_id=mid
                ),
            )
        )
    return sorted(entries, key=lambda e: display_order_key(e.person))


def members_who_owe_you(entries: Iterable[MemberBalance]) -> List[MemberBalance]:
    return [e for e in entries if e.balance.has_positive]


def members_you_owe(entries: Iterable[MemberBalance]) -> List[MemberBalance]:
    return [e for e in entries if e.balance.has_negative]
