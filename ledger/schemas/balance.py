# ledger/schemas/balance.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: запросы/ответы балансов
# -----------------------------------------------------------------------------
# Суммы в ответах: строки, квантованные по decimals валюты: {"USD": "12.50"}.
# Форматирование (символ, локаль): забота клиента.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ledger.schemas.person import Group, Person
from ledger.schemas.settlement import Settlement
from ledger.schemas.transaction import Transaction


class CurrencyBalanceOut(BaseModel):
    balances: Dict[str, str] = Field(default_factory=dict, description="Ненулевые балансы по валютам (> 0: мне должны)")
    is_settled: bool = True
    single_currency: Optional[str] = None
    primary_currency: str = Field(..., description="Валюта с наибольшим модулем (или валюта по умолчанию)")
    has_positive: bool = False
    has_negative: bool = False


class MemberBalanceOut(BaseModel):
    person: Person
    balance: CurrencyBalanceOut


class PersonBalanceIn(BaseModel):
    current_user_id: int
    person_id: int
    transactions: List[Transaction] = Field(default_factory=list)
    settlements: List[Settlement] = Field(default_factory=list)


class GroupBalanceIn(BaseModel):
    current_user_id: int
    group: Group
    people: List[Person] = Field(default_factory=list, description="Карточки участников (для имён)")
    transactions: List[Transaction] = Field(default_factory=list)


class GroupBalanceOut(BaseModel):
    total: CurrencyBalanceOut
    members: List[MemberBalanceOut]
    owe_you: List[MemberBalanceOut]
    you_owe: List[MemberBalanceOut]


class PeopleBalancesIn(BaseModel):
    current_user_id: int
    people: List[Person] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    settlements: List[Settlement] = Field(default_factory=list)


class PeopleBalancesOut(BaseModel):
    people: List[MemberBalanceOut]
    owed_to_you: Dict[str, str]
    you_owe: Dict[str, str]
