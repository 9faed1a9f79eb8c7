# ledger/exceptions.py
# -----------------------------------------------------------------------------
# ДОМЕННЫЕ ОШИБКИ
# -----------------------------------------------------------------------------
# Расчёты (калькулятор, предикаты, балансы) НЕ бросают: деградируют мягко.
# Бросают только пути «фиксации»: сохранение долей и черновик погашения.
# Роутеры переводят эти ошибки в HTTP 422.
#
#   LedgerError (ValueError)
#   ├── SplitValidationError: деление не проходит проверку перед сохранением
#   └── SettlementError: погашение невозможно (нет долга / неверная сумма)
# -----------------------------------------------------------------------------

from __future__ import annotations


class LedgerError(ValueError):
    """База для доменных ошибок движка."""

    def __init__(self, detail: str = "Ledger error"):
        self.detail = detail
        super().__init__(detail)


class SplitValidationError(LedgerError):
    pass


class SettlementError(LedgerError):
    pass
