# ledger/main.py
# Точка входа FastAPI для движка долей и балансов.
#  • Хранения нет: все ручки: чистый пересчёт по присланным записям.
#  • Логирование настраивается здесь, уровень: LOG_LEVEL из .env.

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledger import config
from ledger.routers.balances import router as balances_router
from ledger.routers.settlements import router as settlements_router
from ledger.routers.splits import router as splits_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Splitto Ledger",
    description="Деление расходов и балансы «кто кому сколько должен» по валютам",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Подключение роутеров ---
app.include_router(splits_router,       prefix="/api", tags=["Деление"])
app.include_router(balances_router,     prefix="/api", tags=["Балансы"])
app.include_router(settlements_router,  prefix="/api", tags=["Погашения"])


@app.get("/")
def root():
    """Простой healthcheck."""
    return {"message": "Splitto ledger работает!", "docs": "/docs"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("ledger.main:app", host="0.0.0.0", port=8000, reload=False)
