"""Pydantic schemas for lending reports."""

from datetime import date

from pydantic import BaseModel


class LoanSummary(BaseModel):
    """Summary of a loan for listing."""

    item_id: int
    title: str
    borrower_name: str
    loan_date: date
    due_date: date
    renewal_count: int
    is_overdue: bool
    days_until_due: int
    fine: float


class OverdueReport(BaseModel):
    """Report of overdue loans."""

    loans: list[LoanSummary]
    total_overdue: int
    oldest_overdue_days: int
    total_fines: float
