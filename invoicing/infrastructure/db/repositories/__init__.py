from .counterparty_repository import CounterpartyRepository
from .invoice_repository import InvoiceRepository
from .sequence_repository import InvoiceSequenceRepository

__all__ = [
    "CounterpartyRepository",
    "InvoiceRepository",
    "InvoiceSequenceRepository",
]
