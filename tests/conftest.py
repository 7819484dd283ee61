"""Shared test fixtures for the invoicing test suite."""

import asyncio
import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from invoicing.domain.models.invoice import Counterparty


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def mumbai_client() -> Counterparty:
    """Client in Maharashtra, same state as the company."""
    return Counterparty(
        id=uuid.UUID("11111111-1111-1111-1111-111111111111"),
        kind="contact",
        name="Asha Patil",
        company_name="Patil Learning LLP",
        address="12 Linking Road, Bandra West",
        city="Mumbai",
        state="Maharashtra",
        pincode="400050",
        gstin="27AABCT1234C1Z5",
        pan="AABCT1234C",
        email="asha@patillearning.in",
        phone="+91 98200 00000",
        is_company=True,
    )


@pytest.fixture
def bengaluru_client() -> Counterparty:
    """Client in Karnataka with no GSTIN; state name decides the split."""
    return Counterparty(
        id=uuid.UUID("22222222-2222-2222-2222-222222222222"),
        kind="contact",
        name="Ravi Kumar",
        city="Bengaluru",
        state="Karnataka",
        pincode="560001",
    )


@pytest.fixture
def freelancer() -> Counterparty:
    return Counterparty(
        id=uuid.UUID("33333333-3333-3333-3333-333333333333"),
        kind="freelancer",
        name="Meera Iyer",
        state="Maharashtra",
        pan="ABCPI1234K",
        bank_name="ICICI Bank",
        bank_account_number="000401000123",
        bank_ifsc_code="ICIC0000004",
    )


@pytest.fixture
def make_invoice():
    """Stand-in for an invoice row with the columns the lifecycle reads."""

    def _make(**overrides):
        fields = {
            "invoice_number": "INV/2024-25/00001",
            "invoice_type": "client",
            "status": "draft",
            "invoice_date": date(2025, 2, 10),
            "due_date": date(2025, 3, 12),
            "total_amount": Decimal("1180"),
            "tds_amount": Decimal("0"),
            "amount_due": Decimal("1180"),
            "amount_paid": Decimal("0"),
            "sent_at": None,
            "paid_at": None,
        }
        fields.update(overrides)
        return SimpleNamespace(**fields)

    return _make
