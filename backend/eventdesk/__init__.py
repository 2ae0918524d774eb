"""Core package for the EventDesk proposal, schedule and ledger engine."""

from .conflicts import ConflictAdvisory, find_conflict
from .controller import DashboardController, ProposalCreated
from .errors import PersistenceError, RecordNotFound, ValidationError
from .ledger import KPISet, compute_kpis
from .models import (
    BusinessProfile,
    Event,
    Proposal,
    ProposalStage,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from .pipeline import ProposalPipeline
from .receivables import on_proposal_closed
from .schedule import project_schedule
from .store import DataStore, LocalJsonStore

__all__ = [
    "BusinessProfile",
    "ConflictAdvisory",
    "DashboardController",
    "DataStore",
    "Event",
    "KPISet",
    "LocalJsonStore",
    "PersistenceError",
    "Proposal",
    "ProposalCreated",
    "ProposalPipeline",
    "ProposalStage",
    "RecordNotFound",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
    "ValidationError",
    "compute_kpis",
    "find_conflict",
    "on_proposal_closed",
    "project_schedule",
]
