"""
Тесты HTTP-слоя: ручки без хранения, всё приходит в теле запроса.
Decimal в JSON приходит строкой: сравниваем через Decimal(...).
"""

from decimal import Decimal

from conftest import ALICE, BOB, CAROL, ME


def _person(pid, name):
    return {"id": pid, "name": name}


PEOPLE = [_person(ME, "Me"), _person(ALICE, "Alice"), _person(BOB, "Bob"), _person(CAROL, "Carol")]


def _tx(tx_id, amount, payer, splits, currency="USD", group_id=None, payers=None):
    payer_ref = {"kind": "self"} if payer == "self" else {"kind": "person", "person_id": payer}
    return {
        "id": tx_id,
        "amount": str(amount),
        "currency_code": currency,
        "date": "2026-01-01T12:00:00",
        "payer": payer_ref,
        "payers": [
            {"transaction_id": tx_id, "person_id": pid, "amount": str(a)} for pid, a in (payers or {}).items()
        ],
        "splits": [
            {"transaction_id": tx_id, "person_id": pid, "amount": str(a)} for pid, a in splits.items()
        ],
        "group_id": group_id,
    }


class TestRoot:

    def test_healthcheck(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert r.json()["docs"] == "/docs"


class TestSplitsApi:

    def test_preview_equal(self, client):
        r = client.post(
            "/api/splits/preview",
            json={
                "amount": "10.00",
                "currency_code": "usd",
                "method": "equal",
                "participants": PEOPLE[1:],
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert data["is_valid"] is True
        assert data["message"] is None
        assert Decimal(data["details"][str(ALICE)]["amount"]) == Decimal("3.34")
        assert Decimal(data["details"][str(BOB)]["amount"]) == Decimal("3.33")
        assert Decimal(data["remaining"]) == Decimal("0")

    def test_preview_reports_invalid_without_error(self, client):
        r = client.post(
            "/api/splits/preview",
            json={
                "amount": "10.00",
                "currency_code": "USD",
                "method": "percentage",
                "participants": PEOPLE[1:3],
                "inputs": {str(ALICE): "50", str(BOB): "20"},
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert data["is_valid"] is False
        assert data["message"] == "Percentages must add up to 100%"
        assert Decimal(data["remaining"]) == Decimal("3.00")

    def test_preview_zero_decimal_currency(self, client):
        r = client.post(
            "/api/splits/preview",
            json={"amount": "1000", "currency_code": "JPY", "participants": PEOPLE[1:]},
        )
        assert Decimal(r.json()["details"][str(ALICE)]["amount"]) == Decimal("334")

    def test_preview_rejects_bad_currency(self, client):
        r = client.post(
            "/api/splits/preview",
            json={"amount": "10", "currency_code": "DOLLARS", "participants": PEOPLE[1:]},
        )
        assert r.status_code == 422

    def test_finalize_multi_payer(self, client):
        r = client.post(
            "/api/splits/finalize",
            json={
                "transaction_id": 5,
                "amount": "90",
                "currency_code": "USD",
                "method": "equal",
                "participants": PEOPLE[1:],
                "payers": [{"person_id": CAROL, "amount": "60"}, {"person_id": BOB, "amount": "30"}],
                "current_user_id": ME,
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert len(data["splits"]) == 3
        assert {p["person_id"] for p in data["payers"]} == {BOB, CAROL}
        assert data["payer"] == {"kind": "person", "person_id": BOB}

    def test_finalize_invalid_is_422(self, client):
        r = client.post(
            "/api/splits/finalize",
            json={
                "transaction_id": 5,
                "amount": "10",
                "currency_code": "USD",
                "method": "amount",
                "participants": PEOPLE[1:3],
                "inputs": {str(ALICE): "4", str(BOB): "4"},
                "current_user_id": ME,
            },
        )
        assert r.status_code == 422
        assert r.json()["detail"] == "Amounts must equal the total"

    def test_finalize_sub_cent_amounts_are_rejected(self, client):
        r = client.post(
            "/api/splits/finalize",
            json={
                "transaction_id": 5,
                "amount": "10.00",
                "currency_code": "USD",
                "method": "amount",
                "participants": PEOPLE[:3],
                "inputs": {str(ME): "3.335", str(ALICE): "3.335", str(BOB): "3.335"},
                "current_user_id": ME,
            },
        )
        assert r.status_code == 422
        assert r.json()["detail"] == "Amounts must equal the total"

    def test_finalize_requires_current_user(self, client):
        r = client.post(
            "/api/splits/finalize",
            json={"transaction_id": 5, "amount": "10", "currency_code": "USD", "participants": PEOPLE[1:]},
        )
        assert r.status_code == 422


class TestBalancesApi:

    def test_person_balance(self, client):
        r = client.post(
            "/api/balances/person",
            json={
                "current_user_id": ME,
                "person_id": ALICE,
                "transactions": [
                    _tx(1, "30", "self", {ME: "10", ALICE: "20"}),
                    _tx(2, "12", ALICE, {ME: "12"}, currency="EUR"),
                ],
                "settlements": [
                    {
                        "id": 1,
                        "from_person_id": ALICE,
                        "to_person_id": ME,
                        "amount": "5",
                        "currency_code": "USD",
                        "date": "2026-01-02T12:00:00",
                    }
                ],
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert data["balances"] == {"USD": "15.00", "EUR": "-12.00"}
        assert data["primary_currency"] == "USD"
        assert data["single_currency"] is None
        assert data["has_positive"] and data["has_negative"]
        assert data["is_settled"] is False

    def test_settled_person_uses_default_currency(self, client):
        r = client.post("/api/balances/person", json={"current_user_id": ME, "person_id": ALICE})
        data = r.json()
        assert data["is_settled"] is True
        assert data["balances"] == {}
        assert len(data["primary_currency"]) == 3

    def test_group_balance(self, client):
        r = client.post(
            "/api/balances/group",
            json={
                "current_user_id": ME,
                "group": {"id": 10, "name": "Trip", "member_ids": [ME, ALICE, BOB]},
                "people": PEOPLE,
                "transactions": [
                    _tx(1, "30", "self", {ME: "10", ALICE: "10", BOB: "10"}, group_id=10),
                    _tx(2, "50", BOB, {ME: "25", BOB: "25"}, group_id=10),
                    _tx(3, "100", "self", {ME: "50", ALICE: "50"}),
                ],
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert data["total"]["balances"] == {"USD": "-5.00"}
        assert [m["person"]["id"] for m in data["members"]] == [ALICE, BOB]
        assert [m["person"]["id"] for m in data["owe_you"]] == [ALICE]
        assert [m["person"]["id"] for m in data["you_owe"]] == [BOB]
        assert data["you_owe"][0]["balance"]["balances"] == {"USD": "-15.00"}

    def test_people_balances(self, client):
        r = client.post(
            "/api/balances/people",
            json={
                "current_user_id": ME,
                "people": PEOPLE,
                "transactions": [
                    _tx(1, "20", "self", {ME: "10", ALICE: "10"}),
                    _tx(2, "10", BOB, {ME: "5", BOB: "5"}),
                ],
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert [p["person"]["name"] for p in data["people"]] == ["Alice", "Bob", "Carol"]
        assert data["owed_to_you"] == {"USD": "10.00"}
        assert data["you_owe"] == {"USD": "-5.00"}


class TestSettlementsApi:

    def test_draft_full(self, client):
        r = client.post(
            "/api/settlements/draft",
            json={
                "current_user_id": ME,
                "person_id": ALICE,
                "currency_code": "USD",
                "transactions": [_tx(1, "30", "self", {ME: "10", ALICE: "20"})],
            },
        )
        assert r.status_code == 200
        data = r.json()
        assert data["from_person_id"] == ALICE
        assert data["to_person_id"] == ME
        assert Decimal(data["amount"]) == Decimal("20")
        assert data["is_full_settlement"] is True

    def test_draft_nothing_to_settle(self, client):
        r = client.post(
            "/api/settlements/draft",
            json={"current_user_id": ME, "person_id": ALICE, "currency_code": "EUR"},
        )
        assert r.status_code == 422
        assert r.json()["detail"] == "Nothing to settle in EUR"

    def test_draft_too_much(self, client):
        r = client.post(
            "/api/settlements/draft",
            json={
                "current_user_id": ME,
                "person_id": ALICE,
                "currency_code": "USD",
                "amount": "25",
                "transactions": [_tx(1, "30", "self", {ME: "10", ALICE: "20"})],
            },
        )
        assert r.status_code == 422

    def test_draft_amount_below_currency_unit(self, client):
        r = client.post(
            "/api/settlements/draft",
            json={
                "current_user_id": ME,
                "person_id": ALICE,
                "currency_code": "USD",
                "amount": "0.004",
                "transactions": [_tx(1, "30", "self", {ME: "10", ALICE: "20"})],
            },
        )
        assert r.status_code == 422
        assert r.json()["detail"] == "Settlement amount must be greater than zero"
