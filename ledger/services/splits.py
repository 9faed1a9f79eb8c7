# ledger/services/splits.py
# -----------------------------------------------------------------------------
# ФИКСАЦИЯ ДЕЛЕНИЯ: SplitDetail → ParticipantSplit / PayerContribution
# -----------------------------------------------------------------------------
# Здесь движок сам является «производителем» записей: на сохранении
# транзакции считаем доли, проверяем их и отдаём слою хранения готовые записи.
#   • Нет проверки: нет записей: SplitValidationError с текстом для пользователя.
#   • Плательщики:
#       - никто не выбран → «я» плачу всю сумму;
#       - один → он платит всю сумму (автозаполнение);
#       - несколько → введённые суммы, должны сходиться с total.
#   • Основной плательщик при нескольких: «я», если я среди них,
#     иначе первый по алфавиту.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence

from ledger.exceptions import SplitValidationError
from ledger.schemas.person import Person, display_order_key
from ledger.schemas.transaction import (
    ParticipantSplit,
    Payer,
    PayerContribution,
    PersonPayer,
    SelfPayer,
    SplitMethod,
)
from ledger.utils.money import D, round_money
from ledger.utils.splits import calculate_splits
from ledger.utils.validation import MSG_PAYERS, is_payers_balanced, validation_message

log = logging.getLogger(__name__)


def finalize_splits(
    transaction_id: int,
    total_amount,
    participants: Sequence[Person],
    method: SplitMethod | str,
    inputs: Optional[Mapping[int, Decimal]] = None,
    payer_amounts: Sequence = (),
    *,
    current_user_id: Optional[int] = None,
    decimals: int = 2,
) -> List[ParticipantSplit]:
    message = validation_message(
        total_amount,
        participants,
        method,
        inputs,
        payer_amounts,
        current_user_id=current_user_id,
        decimals=decimals,
    )
    if message is not None:
        raise SplitValidationError(message)

    try:
        method = SplitMethod(method)
    except ValueError:
        raise SplitValidationError(f"Unknown split method: {method}") from None
    inputs = inputs or {}
    details = calculate_splits(
        total_amount, participants, method, inputs, current_user_id=current_user_id, decimals=decimals
    )

    splits: List[ParticipantSplit] = []
    for person_id, detail in details.items():
        raw = inputs.get(person_id) if method != SplitMethod.equal else None
        splits.append(
            ParticipantSplit(
                transaction_id=transaction_id,
                person_id=person_id,
                amount=detail.amount,
                raw_input=D(raw) if raw is not None else None,
            )
        )
    log.debug("tx %s: finalized %d splits (%s)", transaction_id, len(splits), method.value)
    return splits


def build_payer_contributions(
    transaction_id: int,
    total_amount,
    payer_amounts: Mapping[int, Decimal],
    *,
    current_user_id: int,
    decimals: int = 2,
) -> List[PayerContribution]:
    total = round_money(total_amount, decimals)

    if not payer_amounts:
        return [PayerContribution(transaction_id=transaction_id, person_id=current_user_id, amount=total)]

    if len(payer_amounts) == 1:
        (person_id,) = payer_amounts
        return [PayerContribution(transaction_id=transaction_id, person_id=person_id, amount=total)]

    if not is_payers_balanced(list(payer_amounts.values()), total):
        raise SplitValidationError(MSG_PAYERS)

    return [
        PayerContribution(
            transaction_id=transaction_id,
            person_id=person_id,
            amount=round_money(amount, decimals),
        )
        for person_id, amount in payer_amounts.items()
    ]


def primary_payer(
    payers: Iterable[Person],
    *,
    current_user_id: int,
) -> Payer:
    """Основной плательщик транзакции (для списков и старых клиентов)."""
    payers = list(payers)
    if not payers or any(p.id == current_user_id for p in payers):
        return SelfPayer()
    first = min(payers, key=display_order_key)
    return PersonPayer(person_id=first.id)
