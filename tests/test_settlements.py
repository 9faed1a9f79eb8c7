"""
Тесты черновика погашения: направление, полное/частичное, ошибки ввода.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from ledger.exceptions import LedgerError, SettlementError
from ledger.services.balances import person_balance
from ledger.services.settlements import draft_settlement, is_valid_settlement_amount
from ledger.utils.currency_balance import CurrencyBalance

from conftest import ALICE, ME


class TestDraftSettlement:

    def test_full_settlement_when_they_owe_me(self):
        balance = CurrencyBalance({"USD": Decimal("12.345")})
        draft = draft_settlement(balance, "usd", current_user_id=ME, person_id=ALICE)
        assert draft.from_person_id == ALICE
        assert draft.to_person_id == ME
        assert draft.amount == Decimal("12.35")
        assert draft.currency_code == "USD"
        assert draft.is_full_settlement

    def test_full_settlement_when_i_owe(self):
        balance = CurrencyBalance({"EUR": Decimal("-7.5")})
        draft = draft_settlement(balance, "EUR", current_user_id=ME, person_id=ALICE)
        assert (draft.from_person_id, draft.to_person_id) == (ME, ALICE)
        assert draft.amount == Decimal("7.50")

    def test_partial_settlement(self):
        balance = CurrencyBalance({"USD": Decimal("20")})
        draft = draft_settlement(
            balance,
            "USD",
            current_user_id=ME,
            person_id=ALICE,
            amount=Decimal("5"),
            note="  за кофе ",
            date=datetime(2026, 2, 1),
        )
        assert draft.amount == Decimal("5.00")
        assert not draft.is_full_settlement
        assert draft.note == "за кофе"
        assert draft.date == datetime(2026, 2, 1)

    def test_blank_note_is_dropped(self):
        balance = CurrencyBalance({"USD": Decimal("20")})
        draft = draft_settlement(balance, "USD", current_user_id=ME, person_id=ALICE, note="   ")
        assert draft.note is None

    def test_applying_draft_settles_balance(self, make_tx, make_settlement):
        txs = [make_tx(30, splits={ME: 10, ALICE: 20})]
        balance = person_balance(txs, [], current_user_id=ME, person_id=ALICE)
        draft = draft_settlement(balance, "USD", current_user_id=ME, person_id=ALICE)
        settled = make_settlement(draft.from_person_id, draft.to_person_id, draft.amount)
        assert person_balance(txs, [settled], current_user_id=ME, person_id=ALICE).is_settled


class TestDraftErrors:

    def test_cannot_settle_with_yourself(self):
        with pytest.raises(SettlementError, match="yourself"):
            draft_settlement(CurrencyBalance({"USD": Decimal("5")}), "USD", current_user_id=ME, person_id=ME)

    def test_nothing_to_settle(self):
        with pytest.raises(SettlementError, match="Nothing to settle in EUR"):
            draft_settlement(CurrencyBalance({"USD": Decimal("5")}), "EUR", current_user_id=ME, person_id=ALICE)

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-1")])
    def test_non_positive_amount(self, amount):
        with pytest.raises(SettlementError, match="greater than zero"):
            draft_settlement(
                CurrencyBalance({"USD": Decimal("5")}),
                "USD",
                current_user_id=ME,
                person_id=ALICE,
                amount=amount,
            )

    def test_amount_above_outstanding(self):
        with pytest.raises(LedgerError) as exc:
            draft_settlement(
                CurrencyBalance({"USD": Decimal("-5")}),
                "USD",
                current_user_id=ME,
                person_id=ALICE,
                amount=Decimal("5.01"),
            )
        assert "exceed" in exc.value.detail

    def test_amount_rounding_to_zero(self):
        with pytest.raises(SettlementError, match="greater than zero"):
            draft_settlement(
                CurrencyBalance({"USD": Decimal("10")}),
                "USD",
                current_user_id=ME,
                person_id=ALICE,
                amount=Decimal("0.004"),
            )

    def test_amount_rounding_above_outstanding(self):
        with pytest.raises(SettlementError, match="exceed"):
            draft_settlement(
                CurrencyBalance({"USD": Decimal("5.004")}),
                "USD",
                current_user_id=ME,
                person_id=ALICE,
                amount=Decimal("5.005"),
            )

    def test_full_balance_below_currency_unit(self):
        with pytest.raises(SettlementError, match="Nothing to settle in JPY"):
            draft_settlement(
                CurrencyBalance({"JPY": Decimal("0.4")}),
                "JPY",
                current_user_id=ME,
                person_id=ALICE,
                decimals=0,
            )


def test_is_valid_settlement_amount():
    assert is_valid_settlement_amount(Decimal("5"), Decimal("-5"))
    assert is_valid_settlement_amount(Decimal("5.0005"), Decimal("5"))
    assert not is_valid_settlement_amount(Decimal("5.01"), Decimal("5"))
    assert not is_valid_settlement_amount(Decimal("0.001"), Decimal("5"))
