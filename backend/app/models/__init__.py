"""Database model exports."""

from .directory import BusinessProfileRecord, ServicePackageRecord, SupplierRecord
from .events import EventRecord
from .ledger import TransactionRecord
from .proposals import ClientRecord, ProposalRecord

__all__ = [
    "BusinessProfileRecord",
    "ClientRecord",
    "EventRecord",
    "ProposalRecord",
    "ServicePackageRecord",
    "SupplierRecord",
    "TransactionRecord",
]
