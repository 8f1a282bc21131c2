"""Loan records and lending rules."""

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional

from ..errors import InvalidStateError

if TYPE_CHECKING:
    from ..config import Config

STANDARD_LOAN_DAYS = 14
MAX_RENEWALS = 3
DAILY_FINE_RATE = 0.50

DATE_FORMAT = "%d/%m/%Y"


@dataclass(frozen=True)
class LoanPolicy:
    """Loan period, renewal cap and fine rate."""

    loan_period_days: int = STANDARD_LOAN_DAYS
    max_renewals: int = MAX_RENEWALS
    daily_fine: float = DAILY_FINE_RATE

    @classmethod
    def from_config(cls, config: "Config") -> "LoanPolicy":
        return cls(
            loan_period_days=config.loan_period_days,
            max_renewals=config.max_renewals,
            daily_fine=config.daily_fine,
        )

    @property
    def loan_period(self) -> timedelta:
        return timedelta(days=self.loan_period_days)


DEFAULT_POLICY = LoanPolicy()


@dataclass(frozen=True)
class LoanRecord:
    """An active loan of one catalog item.

    Records are immutable. Renewing produces a new record with a later
    due date and a higher renewal count.
    """

    item_id: int
    borrower_name: str
    loan_date: date
    due_date: date
    renewal_count: int = 0

    def __post_init__(self):
        if self.renewal_count < 0:
            raise ValueError("renewal_count cannot be negative")
        if self.due_date < self.loan_date:
            raise ValueError("due_date must not be before loan_date")

    @classmethod
    def start(
        cls,
        item_id: int,
        borrower_name: str,
        today: date,
        policy: LoanPolicy = DEFAULT_POLICY,
    ) -> "LoanRecord":
        """Open a new loan due one loan period from ``today``."""
        return cls(
            item_id=item_id,
            borrower_name=borrower_name,
            loan_date=today,
            due_date=today + policy.loan_period,
        )

    def is_overdue(self, today: Optional[date] = None) -> bool:
        return (today or date.today()) > self.due_date

    def days_until_due(self, today: Optional[date] = None) -> int:
        """Days until due (negative if overdue)."""
        return (self.due_date - (today or date.today())).days

    def days_overdue(self, today: Optional[date] = None) -> int:
        """Days overdue (0 if not overdue)."""
        return max(0, -self.days_until_due(today))

    def can_renew(self, today: Optional[date] = None, policy: LoanPolicy = DEFAULT_POLICY) -> bool:
        return self.renewal_count < policy.max_renewals and not self.is_overdue(today)

    def calculate_fine(self, today: Optional[date] = None, policy: LoanPolicy = DEFAULT_POLICY) -> float:
        """Fine owed so far; zero unless overdue."""
        return self.days_overdue(today) * policy.daily_fine

    def renew(self, today: Optional[date] = None, policy: LoanPolicy = DEFAULT_POLICY) -> "LoanRecord":
        """Return the renewed record.

        Raises:
            InvalidStateError: If the loan is overdue or has no renewals left
        """
        if self.is_overdue(today):
            raise InvalidStateError("Cannot renew: loan is overdue", self.item_id)
        if self.renewal_count >= policy.max_renewals:
            raise InvalidStateError("Cannot renew: maximum renewals reached", self.item_id)
        return replace(
            self,
            due_date=self.due_date + policy.loan_period,
            renewal_count=self.renewal_count + 1,
        )

    def additional_info(self, today: Optional[date] = None, policy: LoanPolicy = DEFAULT_POLICY) -> str:
        info = (
            f"LOAN DETAILS: Borrower: {self.borrower_name}, "
            f"Loaned: {self.loan_date.strftime(DATE_FORMAT)}, "
            f"Due: {self.due_date.strftime(DATE_FORMAT)}, "
            f"Days remaining: {self.days_until_due(today)}, "
            f"Renewals: {self.renewal_count}/{policy.max_renewals}"
        )
        if self.is_overdue(today):
            info += f" [OVERDUE by {self.days_overdue(today)} days]"
        return info
