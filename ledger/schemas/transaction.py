# ledger/schemas/transaction.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Transaction / ParticipantSplit / PayerContribution
# -----------------------------------------------------------------------------
# Цели:
#   • Записи приходят от слоя хранения как обычные данные; движок их только читает.
#   • Коллекции (splits, payers): всегда списки, без «может быть None».
#   • Плательщик: явный вариант: SelfPayer («я») | PersonPayer(person_id).
#     Никакого «None значит текущий пользователь».
#   • Точность сумм не фиксируем в схеме, квантуем по decimals валюты.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, condecimal, field_validator

# Денежное поле без фиксированного количества знаков после запятой.
Money = condecimal(max_digits=18, ge=0)


class SplitMethod(str, Enum):
    equal = "equal"
    amount = "amount"
    percentage = "percentage"
    shares = "shares"
    adjustment = "adjustment"


class SelfPayer(BaseModel):
    kind: Literal["self"] = "self"


class PersonPayer(BaseModel):
    kind: Literal["person"] = "person"
    person_id: int = Field(..., description="Кто оплатил")


Payer = Annotated[Union[SelfPayer, PersonPayer], Field(discriminator="kind")]


def normalize_currency_code(v: Optional[str]) -> str:
    v = str(v or "").strip().upper()
    if len(v) != 3:
        raise ValueError("Код валюты должен содержать 3 символа (ISO 4217)")
    return v


class PayerContribution(BaseModel):
    transaction_id: int = Field(..., description="ID транзакции")
    person_id: int = Field(..., description="Кто внёс деньги")
    amount: Money = Field(..., description="Сколько внёс")


class ParticipantSplit(BaseModel):
    transaction_id: int = Field(..., description="ID транзакции")
    person_id: int = Field(..., description="Кто должен долю")
    amount: Money = Field(..., description="Сумма доли")
    # исходный ввод (проценты/доли/корректировка): чтобы форму можно было открыть на редактирование
    raw_input: Optional[Decimal] = Field(None, description="Исходное значение для метода деления")


class Transaction(BaseModel):
    id: int
    title: Optional[str] = None
    amount: Money
    currency_code: str = Field(..., description="Код валюты ISO-4217, фиксируется на транзакции")
    date: datetime = Field(default_factory=datetime.utcnow)
    split_method: SplitMethod = SplitMethod.equal

    payer: Payer = Field(default_factory=SelfPayer, description="Основной плательщик")
    payers: List[PayerContribution] = Field(default_factory=list, description="Взносы при нескольких плательщиках")
    splits: List[ParticipantSplit] = Field(default_factory=list, description="Доли участников")

    group_id: Optional[int] = None

    @field_validator("currency_code", mode="before")
    @classmethod
    def _normalize_currency_code(cls, v):
        return normalize_currency_code(v)

    @property
    def is_multi_payer(self) -> bool:
        return len(self.payers) > 1
