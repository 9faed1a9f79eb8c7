# ledger/schemas/person.py
# -----------------------------------------------------------------------------
# СХЕМЫ Pydantic: Person / Group
# -----------------------------------------------------------------------------
# Движок не хранит людей и группы: их отдаёт внешний слой данных.
# Нам нужны только id, имя (для детерминированного порядка) и состав группы.
# -----------------------------------------------------------------------------

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class Person(BaseModel):
    id: int = Field(..., description="ID человека")
    name: str = Field("", description="Отображаемое имя (для сортировки и раскладки остатков)")


class Group(BaseModel):
    id: int = Field(..., description="ID группы")
    name: Optional[str] = Field(None, description="Название группы")
    member_ids: List[int] = Field(default_factory=list, description="Состав группы (включая текущего пользователя)")


def display_order_key(person: Person, current_user_id: Optional[int] = None):
    """
    Ключ детерминированного порядка: «я» первым, затем по имени (без регистра), затем по id.
    Используется и для раскладки остатка копеек, и для списков участников.
    """
    return (
        0 if current_user_id is not None and person.id == current_user_id else 1,
        (person.name or "").casefold(),
        person.id,
    )
