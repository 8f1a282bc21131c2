"""Presentation bundles that can be attached to a catalog item.

Bundles are plain attribute records. They carry no loan state and are
never persisted; descriptions are built by folding the bundles attached
to an item over the item's base description.
"""

from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, ClassVar, Optional, Sequence, Union

from ..catalog.schemas import Availability, CatalogItem

if TYPE_CHECKING:
    from ..lending.models import LoanPolicy, LoanRecord

INFO_SEPARATOR = " | "


@dataclass(frozen=True)
class Reservation:
    """Someone is queued for the item."""

    reserved_by: str
    queue_position: int
    kind: ClassVar[str] = "reservation"

    def __post_init__(self):
        if self.queue_position < 1:
            raise ValueError("queue_position must be 1 or greater")

    @property
    def tag(self) -> str:
        return "[RESERVED]"

    def info(self) -> str:
        return f"RESERVATION: Reserved by {self.reserved_by}, Queue position: {self.queue_position}"

    def is_next_in_queue(self) -> bool:
        return self.queue_position == 1


@dataclass(frozen=True)
class SpecialCollection:
    """The item belongs to a restricted collection."""

    collection_name: str
    requires_approval: bool
    location: str
    kind: ClassVar[str] = "special_collection"

    @property
    def tag(self) -> str:
        return f"[SPECIAL COLLECTION: {self.collection_name}]"

    def info(self) -> str:
        approval = ", Requires approval for loan" if self.requires_approval else ""
        return f"SPECIAL COLLECTION: {self.collection_name}, Location: {self.location}{approval}"


AnyBundle = Union[Reservation, SpecialCollection]


@dataclass(frozen=True)
class ItemDescription:
    """Combined view of an item, its bundles and its active loan."""

    item_id: int
    description: str
    availability: Availability
    additional_info: str
    bundles: tuple[AnyBundle, ...] = ()


def base_description(item: CatalogItem) -> str:
    return (
        f"Book: '{item.title}' by {item.author} "
        f"[{item.category.value}, {item.medium.value}]"
    )


def describe(
    item: CatalogItem,
    bundles: Sequence[AnyBundle] = (),
    loan: Optional["LoanRecord"] = None,
    today: Optional[date] = None,
    policy: Optional["LoanPolicy"] = None,
) -> ItemDescription:
    """Fold ``bundles`` (and an active loan, last) over ``item``."""
    tags = [bundle.tag for bundle in bundles]
    infos = [bundle.info() for bundle in bundles]
    availability = item.availability

    if loan is not None:
        tags.append("[ON LOAN]")
        infos.append(
            loan.additional_info(today, policy) if policy else loan.additional_info(today)
        )
        availability = Availability.LOANED

    description = " ".join([base_description(item), *tags])
    return ItemDescription(
        item_id=item.id,
        description=description,
        availability=availability,
        additional_info=INFO_SEPARATOR.join(infos),
        bundles=tuple(bundles),
    )
