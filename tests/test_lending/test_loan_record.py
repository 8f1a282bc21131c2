"""Tests for LoanRecord and LoanPolicy."""

from datetime import date, timedelta

import pytest

from circulation.config import Config
from circulation.errors import InvalidStateError
from circulation.lending.models import DEFAULT_POLICY, LoanPolicy, LoanRecord

LOAN_DATE = date(2025, 3, 1)


@pytest.fixture
def record() -> LoanRecord:
    return LoanRecord.start(1, "Alice", LOAN_DATE)


class TestLoanRecord:
    """Tests for due dates, overdue state and fines."""

    def test_start_sets_due_date(self, record):
        assert record.loan_date == LOAN_DATE
        assert record.due_date == date(2025, 3, 15)
        assert record.renewal_count == 0

    def test_start_uses_policy(self):
        record = LoanRecord.start(1, "Alice", LOAN_DATE, LoanPolicy(loan_period_days=7))
        assert record.due_date == date(2025, 3, 8)

    def test_not_overdue_on_due_date(self, record):
        assert not record.is_overdue(record.due_date)
        assert record.days_until_due(record.due_date) == 0
        assert record.calculate_fine(record.due_date) == 0

    def test_overdue_day_after_due_date(self, record):
        today = record.due_date + timedelta(days=1)
        assert record.is_overdue(today)
        assert record.days_overdue(today) == 1
        assert record.calculate_fine(today) == pytest.approx(0.50)

    def test_five_days_overdue(self, record):
        today = LOAN_DATE + timedelta(days=19)

        assert record.days_until_due(today) == -5
        assert record.days_overdue(today) == 5
        assert record.calculate_fine(today) == pytest.approx(2.50)

    def test_days_until_due(self, record):
        assert record.days_until_due(LOAN_DATE) == 14
        assert record.days_overdue(LOAN_DATE) == 0

    def test_custom_fine_rate(self, record):
        policy = LoanPolicy(daily_fine=1.25)
        assert record.calculate_fine(LOAN_DATE + timedelta(days=16), policy) == pytest.approx(2.50)

    def test_rejects_negative_renewals(self):
        with pytest.raises(ValueError):
            LoanRecord(1, "Alice", LOAN_DATE, LOAN_DATE, renewal_count=-1)

    def test_rejects_due_before_loan(self):
        with pytest.raises(ValueError):
            LoanRecord(1, "Alice", LOAN_DATE, LOAN_DATE - timedelta(days=1))


class TestRenew:
    """Tests for renewing a loan."""

    def test_renew_extends_due_date(self, record):
        renewed = record.renew(LOAN_DATE)

        assert renewed.due_date == date(2025, 3, 29)
        assert renewed.renewal_count == 1
        assert renewed.loan_date == record.loan_date
        assert record.renewal_count == 0

    def test_renew_cap(self, record):
        for _ in range(DEFAULT_POLICY.max_renewals):
            record = record.renew(LOAN_DATE)

        assert record.renewal_count == 3
        assert not record.can_renew(LOAN_DATE)
        with pytest.raises(InvalidStateError, match="maximum renewals reached"):
            record.renew(LOAN_DATE)

    def test_renew_overdue(self, record):
        today = LOAN_DATE + timedelta(days=19)

        assert not record.can_renew(today)
        with pytest.raises(InvalidStateError, match="loan is overdue"):
            record.renew(today)

    def test_can_renew_on_due_date(self, record):
        assert record.can_renew(record.due_date)

    def test_zero_renewal_policy(self, record):
        policy = LoanPolicy(max_renewals=0)
        assert not record.can_renew(LOAN_DATE, policy)


class TestAdditionalInfo:
    def test_info_line(self, record):
        assert record.additional_info(LOAN_DATE) == (
            "LOAN DETAILS: Borrower: Alice, Loaned: 01/03/2025, Due: 15/03/2025, "
            "Days remaining: 14, Renewals: 0/3"
        )

    def test_overdue_suffix(self, record):
        info = record.additional_info(LOAN_DATE + timedelta(days=19))
        assert info.endswith("[OVERDUE by 5 days]")


class TestLoanPolicy:
    def test_defaults(self):
        assert DEFAULT_POLICY.loan_period_days == 14
        assert DEFAULT_POLICY.max_renewals == 3
        assert DEFAULT_POLICY.daily_fine == 0.50
        assert DEFAULT_POLICY.loan_period == timedelta(days=14)

    def test_from_config(self, tmp_path):
        config = Config(
            db_path=tmp_path / "c.db",
            loan_period_days=21,
            max_renewals=1,
            daily_fine=0.25,
            log_level="INFO",
            notify_email=None,
        )
        policy = LoanPolicy.from_config(config)
        assert policy == LoanPolicy(loan_period_days=21, max_renewals=1, daily_fine=0.25)
