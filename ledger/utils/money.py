# ledger/utils/money.py
# -----------------------------------------------------------------------------
# ДЕНЕЖНЫЕ ХЕЛПЕРЫ
# -----------------------------------------------------------------------------
# Политика:
#   • Внутри движка: только Decimal. float в деньги не пускаем (str → Decimal).
#   • Округление: ROUND_HALF_UP до минимальной единицы валюты (decimals).
#   • Раскладка остатков делается в целых «минимальных единицах» (центах),
#     поэтому суммы сходятся копейка в копейку.
# -----------------------------------------------------------------------------

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# допуск сравнения сумм (|x| < 0.01 считаем нулём)
MONEY_TOLERANCE = Decimal("0.01")
# допуск суммы процентов (|Σ% − 100| < 0.1)
PERCENT_TOLERANCE = Decimal("0.1")
# порог «значимой» нетто-позиции внутри одной транзакции
NET_EPSILON = Decimal("0.001")

def D(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None or x == "":
        return ZERO
    return Decimal(str(x))

def quantum(decimals: int) -> Decimal:
    return Decimal("1") if decimals <= 0 else Decimal("1").scaleb(-decimals)

def round_money(d, decimals: int = 2) -> Decimal:
    return D(d).quantize(quantum(decimals), rounding=ROUND_HALF_UP)

def to_minor(amount, decimals: int = 2) -> int:
    """Сумма → целое число минимальных единиц (центов), с округлением HALF_UP."""
    scaled = D(amount).scaleb(max(decimals, 0))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

def floor_minor(amount, decimals: int = 2) -> int:
    """Как to_minor, но с округлением вниз (для раскладки остатков)."""
    scaled = D(amount).scaleb(max(decimals, 0))
    return int(scaled.quantize(Decimal("1"), rounding=ROUND_FLOOR))

def from_minor(units: int, decimals: int = 2) -> Decimal:
    return Decimal(units).scaleb(-max(decimals, 0)).quantize(quantum(decimals))

def percent_of(part, total, places: int = 2) -> Decimal:
    """part / total * 100, округлённо; при total == 0: ноль."""
    total = D(total)
    if total == ZERO:
        return ZERO.quantize(quantum(places))
    return (D(part) / total * HUNDRED).quantize(quantum(places), rounding=ROUND_HALF_UP)

def normalize_currency(code: str | None) -> str:
    code = (code or "").strip().upper()
    # безопасный fallback для «грязных» данных
    return code or "XXX"
