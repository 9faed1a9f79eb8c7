"""
Общие фикстуры тестов движка.

  - people: набор людей с фиксированными id и именами
  - make_tx: фабрика транзакций (плательщик, доли, взносы: одной строкой)
  - make_settlement: фабрика погашений
  - client: TestClient поверх FastAPI-приложения (без хранения, всё в теле запроса)
"""

from datetime import datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient

from ledger.main import app
from ledger.schemas.person import Person
from ledger.schemas.settlement import Settlement
from ledger.schemas.transaction import (
    ParticipantSplit,
    PayerContribution,
    PersonPayer,
    SelfPayer,
    Transaction,
)

ME = 1
ALICE = 2
BOB = 3
CAROL = 4

BASE_DATE = datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def people():
    return {
        ME: Person(id=ME, name="Me"),
        ALICE: Person(id=ALICE, name="Alice"),
        BOB: Person(id=BOB, name="Bob"),
        CAROL: Person(id=CAROL, name="Carol"),
    }


@pytest.fixture
def make_tx():
    ids = count(1)

    def _make(
        amount,
        *,
        payer=None,
        splits=None,
        payers=None,
        currency="USD",
        group_id=None,
        tx_id=None,
        days=0,
    ):
        """
        payer: id плательщика, "self" или None (тогда: SelfPayer).
        splits / payers: {person_id: amount}.
        """
        tid = tx_id if tx_id is not None else next(ids)
        if payer is None or payer == "self":
            payer_ref = SelfPayer()
        else:
            payer_ref = PersonPayer(person_id=payer)
        return Transaction(
            id=tid,
            amount=Decimal(str(amount)),
            currency_code=currency,
            date=BASE_DATE + timedelta(days=days),
            payer=payer_ref,
            payers=[
                PayerContribution(transaction_id=tid, person_id=pid, amount=Decimal(str(a)))
                for pid, a in (payers or {}).items()
            ],
            splits=[
                ParticipantSplit(transaction_id=tid, person_id=pid, amount=Decimal(str(a)))
                for pid, a in (splits or {}).items()
            ],
            group_id=group_id,
        )

    return _make


@pytest.fixture
def make_settlement():
    ids = count(1)

    def _make(from_id, to_id, amount, currency="USD", days=0):
        return Settlement(
            id=next(ids),
            from_person_id=from_id,
            to_person_id=to_id,
            amount=Decimal(str(amount)),
            currency_code=currency,
            date=BASE_DATE + timedelta(days=days),
        )

    return _make


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
