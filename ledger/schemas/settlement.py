# ledger/schemas/settlement.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Settlement (прямое погашение долга)
# -----------------------------------------------------------------------------
# from_person -> to_person на X уменьшает долг from_person перед to_person на X.
# Погашения не привязаны к группе и никогда не меняются: только добавляются.
# -----------------------------------------------------------------------------

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, condecimal, field_validator

from ledger.schemas.transaction import Transaction, normalize_currency_code

PositiveMoney = condecimal(max_digits=18, gt=0)


class SettlementCreate(BaseModel):
    """Черновик погашения: id назначает слой хранения."""

    model_config = ConfigDict(frozen=True)

    from_person_id: int = Field(..., description="Кто платит (должник)")
    to_person_id: int = Field(..., description="Кому платят (кредитор)")
    amount: PositiveMoney = Field(..., description="Сумма погашения")
    currency_code: str = Field(..., description="Код валюты ISO-4217")
    date: datetime = Field(default_factory=datetime.utcnow)
    note: Optional[str] = None
    is_full_settlement: bool = Field(False, description="Погашен весь остаток в валюте")

    @field_validator("currency_code", mode="before")
    @classmethod
    def _normalize_currency_code(cls, v):
        return normalize_currency_code(v)


class Settlement(SettlementCreate):
    id: int


class SettlementDraftIn(BaseModel):
    current_user_id: int
    person_id: int
    currency_code: str
    # None: погасить весь остаток
    amount: Optional[Decimal] = None
    note: Optional[str] = None
    transactions: List[Transaction] = Field(default_factory=list)
    settlements: List[Settlement] = Field(default_factory=list)
