# ledger/utils/currency_balance.py
# -----------------------------------------------------------------------------
# CurrencyBalance: НАКОПИТЕЛЬ БАЛАНСА ПО ВАЛЮТАМ
# -----------------------------------------------------------------------------
# Политика:
#   • Мультивалютность без конверсии: каждая валюта считается отдельно,
#     межвалютного неттинга нет.
#   • Знак: плюс значит мне должны, минус значит я должен.
#   • Отсутствующая валюта ведёт себя как 0 (merge ничего не «особо» не обрабатывает).
#   • |x| < 0.01 считаем шумом: в non_zero не попадает.
#   • Никогда не хранится: это мгновенный производный срез.
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

from ledger.utils.money import D, MONEY_TOLERANCE, ZERO, normalize_currency, round_money


class CurrencyBalance:
    __slots__ = ("_balances",)

    def __init__(self, balances: Optional[Dict[str, Decimal]] = None) -> None:
        self._balances: Dict[str, Decimal] = defaultdict(Decimal)
        for code, amount in (balances or {}).items():
            self.add(amount, code)

    # --------------------
    # Изменение
    # --------------------

    def add(self, amount, currency: str) -> None:
        self._balances[normalize_currency(currency)] += D(amount)

    def subtract(self, amount, currency: str) -> None:
        self._balances[normalize_currency(currency)] -= D(amount)

    def merge(self, other: "CurrencyBalance") -> None:
        for code, amount in other._balances.items():
            self._balances[code] += amount

    # --------------------
    # Срезы
    # --------------------

    @property
    def balances(self) -> Dict[str, Decimal]:
        return dict(self._balances)

    def get(self, currency: str) -> Decimal:
        return self._balances.get(normalize_currency(currency), ZERO)

    @property
    def non_zero(self) -> Dict[str, Decimal]:
        return {code: v for code, v in self._balances.items() if abs(v) >= MONEY_TOLERANCE}

    @property
    def sorted_by_magnitude(self) -> List[Tuple[str, Decimal]]:
        # при равных модулях сортируем по коду
        return sorted(self.non_zero.items(), key=lambda kv: (-abs(kv[1]), kv[0]))

    @property
    def is_settled(self) -> bool:
        return not self.non_zero

    @property
    def single_currency(self) -> Optional[str]:
        nz = self.non_zero
        return next(iter(nz)) if len(nz) == 1 else None

    @property
    def has_positive(self) -> bool:
        return any(v > ZERO for v in self.non_zero.values())

    @property
    def has_negative(self) -> bool:
        return any(v < ZERO for v in self.non_zero.values())

    @property
    def primary_amount(self) -> Decimal:
        ordered = self.sorted_by_magnitude
        return ordered[0][1] if ordered else ZERO

    def primary_currency(self, default: str) -> str:
        """Валюта с наибольшим модулем; default: явный, глобальных настроек тут не читаем."""
        ordered = self.sorted_by_magnitude
        return ordered[0][0] if ordered else normalize_currency(default)

    @property
    def currency_count(self) -> int:
        return len(self.non_zero)

    def positive_part(self) -> "CurrencyBalance":
        return CurrencyBalance({c: v for c, v in self.non_zero.items() if v > ZERO})

    def negative_part(self) -> "CurrencyBalance":
        return CurrencyBalance({c: v for c, v in self.non_zero.items() if v < ZERO})

    def as_dict(self, decimals_for: Callable[[str], int]) -> Dict[str, str]:
        """Ненулевые валюты → строки, квантованные по decimals валюты ({"USD": "12.50"})."""
        return {code: str(round_money(v, decimals_for(code))) for code, v in self.sorted_by_magnitude}

    # --------------------
    # Протоколы
    # --------------------

    def __neg__(self) -> "CurrencyBalance":
        return CurrencyBalance({c: -v for c, v in self._balances.items()})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurrencyBalance):
            return NotImplemented
        codes = set(self._balances) | set(other._balances)
        return all(self.get(c) == other.get(c) for c in codes)

    def __repr__(self) -> str:
        inner = ", ".join(f"{c}={v}" for c, v in sorted(self._balances.items()))
        return f"CurrencyBalance({inner})"
