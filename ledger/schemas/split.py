# ledger/schemas/split.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: результат калькулятора долей и запросы превью/фиксации
# -----------------------------------------------------------------------------

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ledger.schemas.person import Person
from ledger.schemas.transaction import (
    Money,
    ParticipantSplit,
    Payer,
    PayerContribution,
    SplitMethod,
    normalize_currency_code,
)


class SplitDetail(BaseModel):
    amount: Decimal = Field(..., description="Сколько должен участник")
    percentage: Decimal = Field(Decimal("0"), description="Доля в процентах от суммы")
    shares: Decimal = Field(Decimal("0"), description="Число долей (для split_method='shares')")
    adjustment: Decimal = Field(Decimal("0"), description="Корректировка (для split_method='adjustment')")


class PayerAmountIn(BaseModel):
    person_id: int
    amount: Money


class SplitPreviewIn(BaseModel):
    amount: Money
    currency_code: str
    method: SplitMethod = SplitMethod.equal
    participants: List[Person] = Field(default_factory=list)
    # ввод по участникам (сумма, процент, число долей или корректировка, смотря по методу)
    inputs: Dict[int, Decimal] = Field(default_factory=dict)
    payers: List[PayerAmountIn] = Field(default_factory=list)
    current_user_id: Optional[int] = None

    @field_validator("currency_code", mode="before")
    @classmethod
    def _normalize_currency_code(cls, v):
        return normalize_currency_code(v)


class SplitPreviewOut(BaseModel):
    details: Dict[int, SplitDetail]
    is_valid: bool
    message: Optional[str] = None
    remaining: Decimal


class SplitFinalizeIn(SplitPreviewIn):
    transaction_id: int


class SplitFinalizeOut(BaseModel):
    splits: List[ParticipantSplit]
    payers: List[PayerContribution]
    payer: Payer
