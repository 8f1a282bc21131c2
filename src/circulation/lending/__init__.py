"""Loan lifecycle module.

Provides functionality for:
- Lending, renewing and returning catalog items
- Due date, overdue and fine arithmetic
- Overdue reports
- Reservations and special collections attached to items
"""

from .manager import LendingManager, LoanLifecycleService
from .models import DEFAULT_POLICY, LoanPolicy, LoanRecord
from .schemas import LoanSummary, OverdueReport

__all__ = [
    "DEFAULT_POLICY",
    "LendingManager",
    "LoanLifecycleService",
    "LoanPolicy",
    "LoanRecord",
    "LoanSummary",
    "OverdueReport",
]
