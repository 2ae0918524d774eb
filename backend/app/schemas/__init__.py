"""Pydantic schema exports."""

from .events import (
    ChecklistItemSchema,
    ConflictCheckSchema,
    EventCostCreateRequest,
    EventCostSchema,
    EventCreateRequest,
    EventFinancialsSchema,
    EventMessagesSchema,
    EventSchema,
    TimelineItemCreateRequest,
    TimelineItemSchema,
)
from .proposals import (
    ProposalCreateRequest,
    ProposalCreatedResponse,
    ProposalDraftRequest,
    ProposalDraftSchema,
    ProposalMessageSchema,
    ProposalSchema,
    ProposalStageUpdateRequest,
)
from .finance import (
    DashboardSchema,
    KPISchema,
    MonthlyRevenueSchema,
    TransactionCreateRequest,
    TransactionSchema,
    TransactionStatusUpdateRequest,
)
from .directory import (
    BusinessProfileSchema,
    ClientCreateRequest,
    ClientSchema,
    MessageTemplatesSchema,
    MonthlyGoalUpdateRequest,
    ServicePackageCreateRequest,
    ServicePackageSchema,
    SupplierCreateRequest,
    SupplierSchema,
)

__all__ = [
    "ChecklistItemSchema",
    "ConflictCheckSchema",
    "EventCostCreateRequest",
    "EventCostSchema",
    "EventCreateRequest",
    "EventFinancialsSchema",
    "EventMessagesSchema",
    "EventSchema",
    "TimelineItemCreateRequest",
    "TimelineItemSchema",
    "ProposalCreateRequest",
    "ProposalCreatedResponse",
    "ProposalDraftRequest",
    "ProposalDraftSchema",
    "ProposalMessageSchema",
    "ProposalSchema",
    "ProposalStageUpdateRequest",
    "DashboardSchema",
    "KPISchema",
    "MonthlyRevenueSchema",
    "TransactionCreateRequest",
    "TransactionSchema",
    "TransactionStatusUpdateRequest",
    "BusinessProfileSchema",
    "ClientCreateRequest",
    "ClientSchema",
    "MessageTemplatesSchema",
    "MonthlyGoalUpdateRequest",
    "ServicePackageCreateRequest",
    "ServicePackageSchema",
    "SupplierCreateRequest",
    "SupplierSchema",
]
