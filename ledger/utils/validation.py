# ledger/utils/validation.py
# -----------------------------------------------------------------------------
# ПРЕДИКАТЫ ВАЛИДАЦИИ ДЕЛЕНИЯ (для пути сохранения)
# -----------------------------------------------------------------------------
# Калькулятор долей ничего не отвергает: решение «можно ли сохранять»
# принимает вызывающая сторона по этим предикатам:
#   • percentage : |Σ% − 100| < 0.1
#   • amount     : |Σсумм − total| < 0.01
#   • adjustment : ни одна итоговая доля не отрицательна
#   • equal/shares: валидно при ≥ 1 участнике (shares с нулями откатывается в equal)
#   • несколько плательщиков: |Σвзносов − total| < 0.01
#   • amount и percentage проверяются ещё и по округлённым долям: для amount
#     сумма долей обязана совпасть с total, для percentage допускается
#     расхождение в одну минимальную единицу.
# Ни один предикат не бросает исключений.
# -----------------------------------------------------------------------------

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from ledger.schemas.person import Person
from ledger.schemas.split import SplitDetail
from ledger.schemas.transaction import SplitMethod
from ledger.utils.money import D, HUNDRED, MONEY_TOLERANCE, PERCENT_TOLERANCE, ZERO, quantum, round_money
from ledger.utils.splits import calculate_splits

MSG_AMOUNT = "Amount must be greater than zero"
MSG_PARTICIPANTS = "Select at least one participant"
MSG_PAYERS = "Paid-by amounts must equal the total"
MSG_PERCENTAGE = "Percentages must add up to 100%"
MSG_AMOUNTS = "Amounts must equal the total"
MSG_ADJUSTMENT = "Adjustments cannot make a share negative"
MSG_NEGATIVE = "Values cannot be negative"


def _sum(values: Iterable) -> Decimal:
    return sum((D(v) for v in values), ZERO)


def is_percentage_valid(percentages: Iterable) -> bool:
    return abs(_sum(percentages) - HUNDRED) < PERCENT_TOLERANCE


def is_amount_valid(amounts: Iterable, total) -> bool:
    return abs(_sum(amounts) - D(total)) < MONEY_TOLERANCE


def is_adjustment_valid(details: Mapping[int, SplitDetail]) -> bool:
    return all(d.amount >= ZERO for d in details.values())


def is_shares_valid(participant_count: int) -> bool:
    # все нули → откат на equal, который валиден всегда
    return participant_count >= 1


def is_equal_valid(participant_count: int) -> bool:
    return participant_count >= 1


def is_payers_balanced(contributions: Sequence, total) -> bool:
    """
    contributions: суммы взносов плательщиков.
    Один (или ноль) плательщик автоматически платит всю сумму: всегда сходится.
    """
    if len(contributions) <= 1:
        return True
    return abs(_sum(contributions) - D(total)) < MONEY_TOLERANCE


def remaining_amount(total, details: Mapping[int, SplitDetail]) -> Decimal:
    """Сколько ещё не распределено (для подсказки в форме): total − Σдолей."""
    return D(total) - _sum(d.amount for d in details.values())


def validation_message(
    total,
    participants: Sequence[Person],
    method: SplitMethod | str,
    inputs: Optional[Mapping[int, Decimal]] = None,
    payer_amounts: Sequence = (),
    *,
    current_user_id: Optional[int] = None,
    decimals: int = 2,
) -> Optional[str]:
    """
    Причина, по которой деление нельзя сохранить, или None если всё в порядке.
    Проверки идут в том же порядке, в каком их видит пользователь в форме.
    """
    total = D(total)
    if total <= ZERO:
        return MSG_AMOUNT
    if not participants:
        return MSG_PARTICIPANTS
    if not is_payers_balanced(payer_amounts, total):
        return MSG_PAYERS

    try:
        method = SplitMethod(method)
    except ValueError:
        # калькулятор в этом случае делит поровну
        method = SplitMethod.equal
    inputs = inputs or {}
    ids = {p.id for p in participants}
    values = [D(inputs.get(pid, ZERO)) for pid in ids]

    if method in (SplitMethod.amount, SplitMethod.percentage, SplitMethod.shares):
        if any(v < ZERO for v in values):
            return MSG_NEGATIVE

    if method == SplitMethod.percentage and not is_percentage_valid(values):
        return MSG_PERCENTAGE
    if method == SplitMethod.amount and not is_amount_valid(values, total):
        return MSG_AMOUNTS
    if method not in (SplitMethod.percentage, SplitMethod.amount, SplitMethod.adjustment):
        return None

    # проверяем и то, что реально будет сохранено: доли уже округлены до decimals
    details = calculate_splits(
        total, participants, method, inputs, current_user_id=current_user_id, decimals=decimals
    )
    if method == SplitMethod.adjustment and not is_adjustment_valid(details):
        return MSG_ADJUSTMENT
    drift = abs(round_money(total, decimals) - _sum(d.amount for d in details.values()))
    if method == SplitMethod.amount and drift >= quantum(decimals):
        return MSG_AMOUNTS
    if method == SplitMethod.percentage and drift > quantum(decimals):
        return MSG_PERCENTAGE
    return None


def is_split_valid(
    total,
    participants: Sequence[Person],
    method: SplitMethod | str,
    inputs: Optional[Mapping[int, Decimal]] = None,
    payer_amounts: Sequence = (),
    *,
    current_user_id: Optional[int] = None,
    decimals: int = 2,
) -> bool:
    return validation_message(
        total,
        participants,
        method,
        inputs,
        payer_amounts,
        current_user_id=current_user_id,
        decimals=decimals,
    ) is None
