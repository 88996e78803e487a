"""Pydantic models defining the view shapes shared across Famly."""

from famly.models.calendar import CalendarEvent, EventDraft
from famly.models.family import (
    Family,
    FamilyInvite,
    FamilyMember,
    FamilyMembership,
    FamilyRole,
    InviteLookup,
    InviteStatus,
    UserProfile,
)
from famly.models.finance import (
    EXPENSE_CATEGORIES,
    CategoryTotal,
    Expense,
    ExpenseDraft,
    ExpenseSummary,
)
from famly.models.session import AuthSession
from famly.models.shopping import ShoppingItem, ShoppingList
from famly.models.tasks import StatusFilter, Task, TaskDraft, TaskNode, TaskStatus

__all__ = [
    "AuthSession",
    "CalendarEvent",
    "EventDraft",
    "Family",
    "FamilyInvite",
    "FamilyMember",
    "FamilyMembership",
    "FamilyRole",
    "InviteLookup",
    "InviteStatus",
    "UserProfile",
    "EXPENSE_CATEGORIES",
    "CategoryTotal",
    "Expense",
    "ExpenseDraft",
    "ExpenseSummary",
    "ShoppingItem",
    "ShoppingList",
    "StatusFilter",
    "Task",
    "TaskDraft",
    "TaskNode",
    "TaskStatus",
]
