# ledger/utils/splits.py
# -----------------------------------------------------------------------------
# КАЛЬКУЛЯТОР ДОЛЕЙ (SPLIT CALCULATOR)
# -----------------------------------------------------------------------------
# Политика:
#   • Чистая функция: сумма + участники + метод + ввод → {person_id: SplitDetail}.
#   • Раскладка в целых минимальных единицах валюты (центах):
#       equal : floor(total / n), остаток по 1 центу по порядку участников;
#       shares: floor(точной доли), остаток: наибольшим дробным остаткам.
#     Для equal и shares сумма долей ВСЕГДА равна total.
#   • Порядок участников детерминирован: «я» первым, затем по имени, затем по id.
#     От порядка входного списка результат не зависит.
#   • amount / percentage / adjustment сходятся с total только при валидном вводе
#     (см. ledger/utils/validation.py). Калькулятор ввод не отвергает:
#     форма показывает «как есть» прямо во время редактирования.
#   • Никогда не бросает: нет участников → {}, total <= 0 → нулевые доли,
#     все доли shares = 0 → откат на equal.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from ledger.schemas.person import Person, display_order_key
from ledger.schemas.split import SplitDetail
from ledger.schemas.transaction import SplitMethod
from ledger.utils.money import (
    D,
    HUNDRED,
    ZERO,
    floor_minor,
    from_minor,
    percent_of,
    round_money,
    to_minor,
)

log = logging.getLogger(__name__)


# =========================
# ВСПОМОГАТЕЛЬНОЕ
# =========================

def ordered_participants(
    participants: Iterable[Person],
    current_user_id: Optional[int] = None,
) -> List[Person]:
    """Участники в порядке раскладки остатка, без дублей по id."""
    seen: set[int] = set()
    out: List[Person] = []
    for p in sorted(participants, key=lambda p: display_order_key(p, current_user_id)):
        if p.id in seen:
            continue
        seen.add(p.id)
        out.append(p)
    return out


def distribute_units(total_units: int, count: int) -> List[int]:
    """total_units поровну на count частей; первые (total_units mod count) получают +1."""
    base, remainder = divmod(total_units, count)
    return [base + (1 if i < remainder else 0) for i in range(count)]


def _input(inputs: Mapping[int, Decimal], person_id: int) -> Decimal:
    return D(inputs.get(person_id, ZERO))


def _non_negative(value: Decimal, person_id: int, method: SplitMethod) -> Decimal:
    if value < ZERO:
        log.warning("split %s: negative input %s for person %s treated as 0", method.value, value, person_id)
        return ZERO
    return value


# =========================
# МЕТОДЫ
# =========================

def _split_equal(total: Decimal, people: List[Person], decimals: int) -> Dict[int, SplitDetail]:
    units = distribute_units(to_minor(total, decimals), len(people))
    result: Dict[int, SplitDetail] = {}
    for p, u in zip(people, units):
        amount = from_minor(u, decimals)
        result[p.id] = SplitDetail(amount=amount, percentage=percent_of(amount, total))
    return result


def _split_amount(
    total: Decimal, people: List[Person], inputs: Mapping[int, Decimal], decimals: int
) -> Dict[int, SplitDetail]:
    result: Dict[int, SplitDetail] = {}
    for p in people:
        amount = round_money(_non_negative(_input(inputs, p.id), p.id, SplitMethod.amount), decimals)
        result[p.id] = SplitDetail(amount=amount, percentage=percent_of(amount, total))
    return result


def _split_percentage(
    total: Decimal, people: List[Person], inputs: Mapping[int, Decimal], decimals: int
) -> Dict[int, SplitDetail]:
    result: Dict[int, SplitDetail] = {}
    for p in people:
        pct = _non_negative(_input(inputs, p.id), p.id, SplitMethod.percentage)
        amount = round_money(total * pct / HUNDRED, decimals)
        result[p.id] = SplitDetail(amount=amount, percentage=pct)
    return result


def _split_shares(
    total: Decimal, people: List[Person], inputs: Mapping[int, Decimal], decimals: int
) -> Dict[int, SplitDetail]:
    shares = {p.id: _non_negative(_input(inputs, p.id), p.id, SplitMethod.shares) for p in people}
    total_shares = sum(shares.values(), ZERO)
    if total_shares <= ZERO:
        log.debug("split shares: all shares are zero, falling back to equal")
        return _split_equal(total, people, decimals)

    total_units = to_minor(total, decimals)
    exact = [Decimal(total_units) * shares[p.id] / total_shares for p in people]
    units = [floor_minor(x, 0) for x in exact]

    # остаток центов получают наибольшие дробные части, при равенстве по порядку участников
    leftover = total_units - sum(units)
    by_fraction = sorted(range(len(people)), key=lambda i: (-(exact[i] - units[i]), i))
    for i in by_fraction[:leftover]:
        units[i] += 1

    result: Dict[int, SplitDetail] = {}
    for p, u in zip(people, units):
        amount = from_minor(u, decimals)
        result[p.id] = SplitDetail(
            amount=amount,
            percentage=percent_of(amount, total),
            shares=shares[p.id],
        )
    return result


def _split_adjustment(
    total: Decimal, people: List[Person], inputs: Mapping[int, Decimal], decimals: int
) -> Dict[int, SplitDetail]:
    # корректировки в центах; база = (total − Σкорректировок) поровну, остаток: как в equal
    adjustments = {p.id: to_minor(_input(inputs, p.id), decimals) for p in people}
    remaining_units = to_minor(total, decimals) - sum(adjustments.values())
    base_units = distribute_units(remaining_units, len(people))

    result: Dict[int, SplitDetail] = {}
    for p, base in zip(people, base_units):
        amount = from_minor(base + adjustments[p.id], decimals)
        result[p.id] = SplitDetail(
            amount=amount,
            percentage=percent_of(amount, total),
            adjustment=from_minor(adjustments[p.id], decimals),
        )
    return result


# =========================
# ТОЧКА ВХОДА
# =========================

def calculate_splits(
    total_amount,
    participants: Iterable[Person],
    method: SplitMethod | str = SplitMethod.equal,
    inputs: Optional[Mapping[int, Decimal]] = None,
    *,
    current_user_id: Optional[int] = None,
    decimals: int = 2,
) -> Dict[int, SplitDetail]:
    """
    Делит total_amount между participants выбранным методом.

    inputs: ввод по участникам, смысл зависит от метода:
      amount → сумма, percentage → процент, shares → число долей,
      adjustment → знаковая корректировка; для equal игнорируется.
    Не настроенные участники считаются с 0.

    Возвращает словарь {person_id: SplitDetail} в порядке раскладки остатка.
    """
    people = ordered_participants(participants, current_user_id)
    if not people:
        return {}

    try:
        method = SplitMethod(method)
    except ValueError:
        log.warning("unknown split method %r, falling back to equal", method)
        method = SplitMethod.equal

    inputs = inputs or {}
    total = round_money(total_amount, decimals)
    if total <= ZERO:
        return {p.id: SplitDetail(amount=from_minor(0, decimals)) for p in people}

    if method == SplitMethod.amount:
        return _split_amount(total, people, inputs, decimals)
    if method == SplitMethod.percentage:
        return _split_percentage(total, people, inputs, decimals)
    if method == SplitMethod.shares:
        return _split_shares(total, people, inputs, decimals)
    if method == SplitMethod.adjustment:
        return _split_adjustment(total, people, inputs, decimals)
    return _split_equal(total, people, decimals)


def split_amounts(details: Mapping[int, SplitDetail]) -> Dict[int, Decimal]:
    return {pid: d.amount for pid, d in details.items()}
