"""Lending manager: loan, renew and return catalog items.

The manager owns the active-loan registry, which is the single source of
truth for whether an item is currently on loan. It is kept consistent
with the repository's availability field by always writing the
repository first and touching the registry only after that write
succeeded. Operations on the same item id are serialized by a per-item
lock; operations on different items do not block each other.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Iterator, Optional, Union

from ..augment.bundles import ItemDescription, Reservation, SpecialCollection, describe
from ..augment.registry import AugmentationRegistry
from ..catalog.repository import CatalogRepository
from ..catalog.schemas import Availability, CatalogItem
from ..errors import CirculationError, InvalidStateError, NotFoundError, RepositoryError, ValidationError
from ..notify.notifier import ChangeNotifier, NotificationReport
from ..validation.validators import validate_availability
from .models import DEFAULT_POLICY, LoanPolicy, LoanRecord
from .schemas import LoanSummary, OverdueReport

logger = logging.getLogger(__name__)

SPECIAL_COLLECTIONS_ROOM = "Special Collections Room"


@dataclass
class _ItemLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class LendingManager:
    """Manages the loan lifecycle of catalog items."""

    def __init__(
        self,
        repository: Optional[CatalogRepository] = None,
        notifier: Optional[ChangeNotifier] = None,
        clock: Callable[[], date] = date.today,
        policy: LoanPolicy = DEFAULT_POLICY,
        augmentations: Optional[AugmentationRegistry] = None,
    ):
        """Initialize lending manager.

        Args:
            repository: Catalog store (default: the SQLite store)
            notifier: Receives availability changes
            clock: Returns today's date
            policy: Loan period, renewal cap and fine rate
            augmentations: Reservation and special-collection bundles
        """
        if repository is None:
            from ..catalog.sqlite import SqlCatalogRepository

            repository = SqlCatalogRepository()
        self.repository = repository
        self.notifier = notifier if notifier is not None else ChangeNotifier()
        self.clock = clock
        self.policy = policy
        self.augmentations = augmentations if augmentations is not None else AugmentationRegistry()

        self._active: dict[int, LoanRecord] = {}
        self._registry_lock = threading.Lock()
        self._item_locks: dict[int, _ItemLock] = {}
        self._item_locks_guard = threading.Lock()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _item_lock(self, item_id: int) -> Iterator[None]:
        """Hold the lock for one item id.

        Entries are reference counted and dropped once no thread holds or
        waits on them, so the lock table only has entries for items in use.
        """
        with self._item_locks_guard:
            entry = self._item_locks.get(item_id)
            if entry is None:
                entry = self._item_locks[item_id] = _ItemLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._item_locks_guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._item_locks[item_id]

    def _require_item(self, item_id: int) -> CatalogItem:
        item = self._call_repository(self.repository.find_by_id, item_id)
        if item is None:
            raise NotFoundError(item_id)
        return item

    def _call_repository(self, method, *args):
        try:
            return method(*args)
        except CirculationError:
            raise
        except Exception as e:
            raise RepositoryError(f"Catalog store failure: {e}") from e

    def _persist_availability(self, item: CatalogItem, availability: Availability) -> CatalogItem:
        updated = self._call_repository(
            self.repository.update, item.with_availability(availability)
        )
        logger.info(
            "Item %s availability %s -> %s",
            item.id,
            item.availability.value,
            availability.value,
        )
        return updated

    def _notify(
        self, item: CatalogItem, old: Availability, new: Availability
    ) -> NotificationReport:
        report = self.notifier.notify_all(item, old, new)
        if not report.ok:
            logger.error(
                "%d subscriber(s) failed for item %s (%s -> %s)",
                len(report.failures),
                item.id,
                old.value,
                new.value,
            )
        return report

    def today(self) -> date:
        return self.clock()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def loan(self, item_id: int, borrower_name: str) -> LoanRecord:
        """Lend an available item.

        Args:
            item_id: Catalog item id
            borrower_name: Who is borrowing the item

        Returns:
            The new loan record

        Raises:
            ValidationError: If the borrower name is blank
            NotFoundError: If the item does not exist
            InvalidStateError: If the item is not available
            RepositoryError: If the store fails; nothing changes
        """
        if not borrower_name or not borrower_name.strip():
            raise ValidationError("Borrower name cannot be empty", "BorrowerValidator")

        with self._item_lock(item_id):
            item = self._require_item(item_id)
            if item_id in self._active or not item.is_available:
                raise InvalidStateError(
                    f"Item {item_id} is not available for loan. "
                    f"Current state: {item.availability.value}",
                    item_id,
                )

            record = LoanRecord.start(item_id, borrower_name.strip(), self.today(), self.policy)
            updated = self._persist_availability(item, Availability.LOANED)
            with self._registry_lock:
                self._active[item_id] = record

            logger.info("Item %s loaned to %s until %s", item_id, record.borrower_name, record.due_date)
            self._notify(updated, Availability.AVAILABLE, Availability.LOANED)
            return record

    def renew(self, item_id: int) -> LoanRecord:
        """Extend an active loan by one loan period.

        Raises:
            InvalidStateError: If there is no active loan, the loan is
                overdue, or the renewal cap is reached
        """
        with self._item_lock(item_id):
            current = self.get_active_loan(item_id)
            if current is None:
                raise InvalidStateError(f"No active loan found for item ID: {item_id}", item_id)

            renewed = current.renew(self.today(), self.policy)
            with self._registry_lock:
                self._active[item_id] = renewed

            logger.info(
                "Item %s renewed (%d/%d), now due %s",
                item_id,
                renewed.renewal_count,
                self.policy.max_renewals,
                renewed.due_date,
            )
            return renewed

    def return_item(self, item_id: int) -> CatalogItem:
        """Return a loaned item.

        Returns:
            The item, now available

        Raises:
            InvalidStateError: If the item is not on loan
            NotFoundError: If the item no longer exists; its loan and
                bundles are dropped
            RepositoryError: If the store fails; the loan stays active
        """
        with self._item_lock(item_id):
            if self.get_active_loan(item_id) is None:
                raise InvalidStateError(f"Item {item_id} is not on loan", item_id)

            item = self._call_repository(self.repository.find_by_id, item_id)
            if item is None:
                with self._registry_lock:
                    self._active.pop(item_id, None)
                self.augmentations.detach_all(item_id)
                logger.warning("Item %s no longer exists; dropped its active loan", item_id)
                raise NotFoundError(item_id)

            old = item.availability
            updated = item
            if old != Availability.AVAILABLE:
                updated = self._persist_availability(item, Availability.AVAILABLE)
            with self._registry_lock:
                self._active.pop(item_id, None)

            logger.info("Item %s returned", item_id)
            if old != Availability.AVAILABLE:
                self._notify(updated, old, Availability.AVAILABLE)
            return updated

    def update_availability(
        self, item_id: int, new_availability: Union[str, Availability]
    ) -> CatalogItem:
        """Set an item's availability directly.

        No-op, with no notification, when the availability is unchanged.

        Raises:
            ValidationError: If the availability value is not recognised
            NotFoundError: If the item does not exist
            InvalidStateError: If marking an item with an active loan available
        """
        availability = validate_availability(new_availability)

        with self._item_lock(item_id):
            item = self._require_item(item_id)
            if item.availability == availability:
                return item
            if availability == Availability.AVAILABLE and item_id in self._active:
                raise InvalidStateError(
                    f"Item {item_id} has an active loan; return it instead", item_id
                )

            old = item.availability
            updated = self._persist_availability(item, availability)
            self._notify(updated, old, availability)
            return updated

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_active_loan(self, item_id: int) -> Optional[LoanRecord]:
        with self._registry_lock:
            return self._active.get(item_id)

    def list_active_loans(self) -> list[LoanRecord]:
        """All active loans, ordered by item id."""
        with self._registry_lock:
            return [self._active[key] for key in sorted(self._active)]

    def list_overdue_loans(self) -> list[LoanRecord]:
        today = self.today()
        return [loan for loan in self.list_active_loans() if loan.is_overdue(today)]

    def total_outstanding_fines(self) -> float:
        """Sum of fines on every overdue loan."""
        today = self.today()
        return sum(loan.calculate_fine(today, self.policy) for loan in self.list_overdue_loans())

    def is_overdue(self, record: LoanRecord) -> bool:
        return record.is_overdue(self.today())

    def days_overdue(self, record: LoanRecord) -> int:
        return record.days_overdue(self.today())

    def days_until_due(self, record: LoanRecord) -> int:
        return record.days_until_due(self.today())

    def can_renew(self, record: LoanRecord) -> bool:
        return record.can_renew(self.today(), self.policy)

    def calculate_fine(self, record: LoanRecord) -> float:
        return record.calculate_fine(self.today(), self.policy)

    def loans_due_soon(self, days: int = 7) -> list[LoanRecord]:
        """Active, not yet overdue loans due within ``days`` days."""
        today = self.today()
        horizon = today + timedelta(days=days)
        loans = [
            loan for loan in self.list_active_loans() if today <= loan.due_date <= horizon
        ]
        return sorted(loans, key=lambda loan: loan.due_date)

    def overdue_report(self) -> OverdueReport:
        """Report of overdue loans."""
        today = self.today()
        summaries = []
        oldest_days = 0

        for loan in self.list_overdue_loans():
            item = self._call_repository(self.repository.find_by_id, loan.item_id)
            summaries.append(
                LoanSummary(
                    item_id=loan.item_id,
                    title=item.title if item else "(deleted)",
                    borrower_name=loan.borrower_name,
                    loan_date=loan.loan_date,
                    due_date=loan.due_date,
                    renewal_count=loan.renewal_count,
                    is_overdue=True,
                    days_until_due=loan.days_until_due(today),
                    fine=loan.calculate_fine(today, self.policy),
                )
            )
            oldest_days = max(oldest_days, loan.days_overdue(today))

        return OverdueReport(
            loans=summaries,
            total_overdue=len(summaries),
            oldest_overdue_days=oldest_days,
            total_fines=sum(s.fine for s in summaries),
        )

    # -------------------------------------------------------------------------
    # Reservations and special collections
    # -------------------------------------------------------------------------

    def reserve(self, item_id: int, reserved_by: str, queue_position: int) -> Reservation:
        """Attach a reservation to an item."""
        self._require_item(item_id)
        reservation = Reservation(reserved_by=reserved_by, queue_position=queue_position)
        self.augmentations.attach(item_id, reservation)
        return reservation

    def add_to_special_collection(
        self,
        item_id: int,
        collection_name: str,
        requires_approval: bool,
        location: str,
    ) -> SpecialCollection:
        """Mark an item as part of a special collection."""
        self._require_item(item_id)
        collection = SpecialCollection(
            collection_name=collection_name,
            requires_approval=requires_approval,
            location=location,
        )
        self.augmentations.attach(item_id, collection)
        return collection

    def loan_with_collection(
        self,
        item_id: int,
        borrower_name: str,
        collection_name: Optional[str] = None,
    ) -> ItemDescription:
        """Lend an item, first placing it in a special collection if named."""
        self.loan(item_id, borrower_name)
        if collection_name:
            self.augmentations.attach(
                item_id,
                SpecialCollection(
                    collection_name=collection_name,
                    requires_approval=True,
                    location=SPECIAL_COLLECTIONS_ROOM,
                ),
            )
        return self.describe(item_id)

    def describe(self, item_id: int) -> ItemDescription:
        """Describe an item with its bundles and active loan."""
        item = self._require_item(item_id)
        return describe(
            item,
            self.augmentations.bundles_for(item_id),
            self.get_active_loan(item_id),
            self.today(),
            self.policy,
        )


LoanLifecycleService = LendingManager
