# invoicing/domain/errors.py
"""Domain exceptions raised by invoice persistence and lifecycle services."""

from __future__ import annotations


class InvoicingError(Exception):
    """Base class for invoicing domain errors."""


class CounterpartyNotFound(InvoicingError):
    def __init__(self, kind: str, counterparty_id: object) -> None:
        super().__init__(f"{kind} {counterparty_id} not found")
        self.kind = kind
        self.counterparty_id = counterparty_id


class InvoiceNotFound(InvoicingError):
    def __init__(self, invoice_id: object) -> None:
        super().__init__(f"Invoice {invoice_id} not found")
        self.invoice_id = invoice_id


class InvalidStatusTransition(InvoicingError):
    def __init__(self, current: str, action: str, reason: str = "") -> None:
        message = f"Cannot {action} an invoice in status '{current}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.action = action


class InvoiceNumberConflict(InvoicingError):
    """The store rejected a duplicate invoice number; the creation was rolled back."""

    def __init__(self, invoice_number: str) -> None:
        super().__init__(f"Invoice number {invoice_number} already exists")
        self.invoice_number = invoice_number
