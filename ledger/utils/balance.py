# ledger/utils/balance.py
# -----------------------------------------------------------------------------
# ПАРНЫЙ БАЛАНС ПО ОДНОЙ ТРАНЗАКЦИИ
# -----------------------------------------------------------------------------
# Политика:
#   • Семантика net (нетто-позиции в транзакции):
#       net = заплатил − должен;
#       net > 0: человеку ДОЛЖНЫ; net < 0: он ДОЛЖЕН.
#   • Кто сколько заплатил:
#       - есть взносы (payers): берём их;
#       - нет взносов: основной плательщик заплатил всю сумму.
#   • pairwise_balance(tx, a, b): сколько b должен a по ЭТОЙ транзакции:
#       C = Σ положительных net;
#       net_a > 0 > net_b  →  |net_b| · net_a / C
#       net_a < 0 < net_b  → −|net_a| · net_b / C
#       иначе              →  0
#     Долг каждого должника раскладывается между кредиторами пропорционально
#     их положительной позиции. При одном плательщике это ровно «доля b».
#   • Пара (a, a): всегда 0.
#   • «Грязные» записи (чужой transaction_id, нерешаемый SelfPayer, расхождение
#     сумм больше одной копейки) логируем и пропускаем: одна битая запись не
#     должна ронять балансы. Если не сходятся взносы или доли, транзакция
#     в парный баланс ничего не даёт.
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from ledger.schemas.transaction import PayerContribution, PersonPayer, SelfPayer, Transaction
from ledger.utils.money import D, MONEY_TOLERANCE, NET_EPSILON, ZERO

log = logging.getLogger(__name__)


# =========================
# ПЛАТЕЛЬЩИКИ
# =========================

def resolve_payer_id(tx: Transaction, current_user_id: Optional[int]) -> Optional[int]:
    payer = tx.payer
    if isinstance(payer, PersonPayer):
        return payer.person_id
    if isinstance(payer, SelfPayer) and current_user_id is not None:
        return current_user_id
    log.warning("tx %s: payer is 'self' but current_user_id is not given; payer skipped", tx.id)
    return None


def effective_payers(tx: Transaction, current_user_id: Optional[int] = None) -> List[Tuple[int, Decimal]]:
    """
    [(person_id, paid), ...] по транзакции.
    Для транзакций без взносов: синтезируем одного плательщика на всю сумму.
    """
    contributions = _contributions(tx)
    if contributions:
        if _drifts(tx, (c.amount for c in contributions), "contributions"):
            return []
        return [(c.person_id, D(c.amount)) for c in contributions]

    payer_id = resolve_payer_id(tx, current_user_id)
    if payer_id is None:
        return []
    return [(payer_id, D(tx.amount))]


def payer_ids(tx: Transaction, current_user_id: Optional[int] = None) -> set[int]:
    """Основной плательщик + все, кто делал взнос."""
    ids = {c.person_id for c in _contributions(tx)}
    payer_id = resolve_payer_id(tx, current_user_id)
    if payer_id is not None:
        ids.add(payer_id)
    return ids


def participant_ids(tx: Transaction) -> set[int]:
    return {s.person_id for s in tx.splits if s.transaction_id == tx.id}


def _contributions(tx: Transaction) -> List[PayerContribution]:
    return [c for c in tx.payers if _belongs(tx, c.transaction_id, "payer contribution")]


def _drifts(tx: Transaction, amounts, what: str) -> bool:
    """Сумма расходится с total больше чем на одну минимальную единицу: запись пропускаем."""
    total = sum((D(a) for a in amounts), ZERO)
    if abs(total - D(tx.amount)) > MONEY_TOLERANCE:
        log.warning("tx %s: %s sum %s differs from total %s; skipped", tx.id, what, total, tx.amount)
        return True
    return False


def _belongs(tx: Transaction, transaction_id: int, what: str) -> bool:
    if transaction_id != tx.id:
        log.warning("tx %s: %s references transaction %s; skipped", tx.id, what, transaction_id)
        return False
    return True


# =========================
# НЕТТО-ПОЗИЦИИ
# =========================

def owed_amounts(tx: Transaction) -> Dict[int, Decimal]:
    owed: Dict[int, Decimal] = defaultdict(Decimal)
    for split in tx.splits:
        if not _belongs(tx, split.transaction_id, "split"):
            continue
        owed[split.person_id] += D(split.amount)

    if owed and _drifts(tx, owed.values(), "splits"):
        return {}
    return dict(owed)


def net_positions(tx: Transaction, current_user_id: Optional[int] = None) -> Dict[int, Decimal]:
    """{person_id: paid − owed} по одной транзакции."""
    net: Dict[int, Decimal] = defaultdict(Decimal)
    for pid, paid in effective_payers(tx, current_user_id):
        net[pid] += paid
    for pid, owed in owed_amounts(tx).items():
        net[pid] -= owed
    return dict(net)


# =========================
# ПАРНЫЙ БАЛАНС
# =========================

def pairwise_from_positions(net: Dict[int, Decimal], a: int, b: int) -> Decimal:
    if a == b:
        return ZERO

    net_a = net.get(a, ZERO)
    net_b = net.get(b, ZERO)

    total_credit = sum((v for v in net.values() if v > NET_EPSILON), ZERO)
    if total_credit <= NET_EPSILON:
        return ZERO

    if net_a > NET_EPSILON and net_b < -NET_EPSILON:
        # b должен a: часть долга b, приходящаяся на a
        return abs(net_b) * net_a / total_credit
    if net_a < -NET_EPSILON and net_b > NET_EPSILON:
        # a должен b
        return -(abs(net_a) * net_b / total_credit)
    return ZERO


def pairwise_balance(
    tx: Transaction,
    a: int,
    b: int,
    *,
    current_user_id: Optional[int] = None,
) -> Decimal:
    """
    Сколько b должен a по транзакции tx.
    > 0: b должен a; < 0: a должен b; 0: не связаны или взаимно ноль.
    current_user_id нужен только чтобы раскрыть плательщика SelfPayer.
    """
    if a == b:
        return ZERO
    return pairwise_from_positions(net_positions(tx, current_user_id), a, b)
