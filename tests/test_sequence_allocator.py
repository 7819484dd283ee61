"""Tests for atomic invoice sequence allocation."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.dialects import postgresql

from invoicing.domain.services.invoice_numbering import (
    InMemorySequenceAllocator,
    allocate_invoice_number,
)
from invoicing.infrastructure.db.repositories import InvoiceSequenceRepository

FEB_2025 = date(2025, 2, 10)


def test_concurrent_allocations_are_distinct(event_loop):
    allocator = InMemorySequenceAllocator()

    async def _allocate_many():
        return await asyncio.gather(
            *(allocate_invoice_number("INV", allocator, on=FEB_2025) for _ in range(50))
        )

    numbers = event_loop.run_until_complete(_allocate_many())
    assert len(set(numbers)) == 50
    assert sorted(numbers)[0] == "INV/2024-25/00001"
    assert sorted(numbers)[-1] == "INV/2024-25/00050"


def test_counters_are_scoped_by_prefix_and_year(event_loop):
    allocator = InMemorySequenceAllocator()

    async def _run():
        return (
            await allocator.next_sequence("INV", "2024-25"),
            await allocator.next_sequence("INV", "2024-25"),
            await allocator.next_sequence("FCO", "2024-25"),
            await allocator.next_sequence("INV", "2025-26"),
        )

    assert event_loop.run_until_complete(_run()) == (1, 2, 1, 1)


def test_seeded_allocator_continues_after_existing(event_loop):
    allocator = InMemorySequenceAllocator()
    allocator.seed(["INV/2024-25/00001", "INV/2024-25/00041", "INV/2023-24/00900", "junk"])

    number = event_loop.run_until_complete(allocate_invoice_number("INV", allocator, on=FEB_2025))
    assert number == "INV/2024-25/00042"


def test_repository_upserts_and_returns_counter(event_loop):
    result = MagicMock()
    result.scalar_one.return_value = 7
    mock_db = AsyncMock()
    mock_db.execute = AsyncMock(return_value=result)

    repo = InvoiceSequenceRepository(mock_db)
    value = event_loop.run_until_complete(repo.next_sequence("CON", "2024-25"))

    assert value == 7
    mock_db.execute.assert_awaited_once()
    mock_db.commit.assert_not_awaited()

    stmt = mock_db.execute.await_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT (prefix, financial_year) DO UPDATE" in sql
    assert "RETURNING invoice_sequences.last_number" in sql


def test_repository_allocates_formatted_number(event_loop):
    result = MagicMock()
    result.scalar_one.return_value = 3
    mock_db = AsyncMock()
    mock_db.execute = AsyncMock(return_value=result)

    number = event_loop.run_until_complete(
        allocate_invoice_number("FVE", InvoiceSequenceRepository(mock_db), on=FEB_2025)
    )
    assert number == "FVE/2024-25/00003"


def test_repository_current_defaults_to_zero(event_loop):
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    mock_db = AsyncMock()
    mock_db.execute = AsyncMock(return_value=result)

    assert event_loop.run_until_complete(InvoiceSequenceRepository(mock_db).current("INV", "2024-25")) == 0
