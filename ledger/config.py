# ledger/config.py
# -----------------------------------------------------------------------------
# НАСТРОЙКИ ДВИЖКА (из .env / окружения)
# -----------------------------------------------------------------------------
# Что здесь:
#   • DEFAULT_CURRENCY: валюта «по умолчанию», только для отображения пустого баланса.
#     Движок сам НИКОГДА не подставляет её в транзакции: валюта всегда явная.
#   • MONEY_DECIMALS: знаков после запятой, если валюта не в таблице ниже.
#   • LOG_LEVEL: уровень логирования (настраивается в main.py).
#   • CORS_ORIGINS: список доменов через запятую.
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CURRENCY: str = (os.getenv("DEFAULT_CURRENCY") or "USD").strip().upper()
MONEY_DECIMALS: int = int(os.getenv("MONEY_DECIMALS", "2"))
LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()

CORS_ORIGINS: List[str] = [
    o.strip()
    for o in (os.getenv("CORS_ORIGINS") or "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

# Валюты без дробной части (ISO-4217 minor unit = 0).
# Остальные считаем с MONEY_DECIMALS.
CURRENCY_DECIMALS: Dict[str, int] = {
    "JPY": 0,
    "KRW": 0,
    "VND": 0,
    "CLP": 0,
    "ISK": 0,
    "HUF": 2,
    "KWD": 3,
    "BHD": 3,
    "OMR": 3,
}


def decimals_for(code: str | None) -> int:
    """Количество знаков после запятой для валюты (fallback: MONEY_DECIMALS)."""
    if not code:
        return MONEY_DECIMALS
    return CURRENCY_DECIMALS.get(code.strip().upper(), MONEY_DECIMALS)
