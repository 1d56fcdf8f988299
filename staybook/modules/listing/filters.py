"""Search criteria to listing predicates.

``build_listing_filter`` turns the raw values of the search form into a
``ListingSearchFilter``. The filter renders itself as a MongoDB query for the
repository (``to_query``) and can evaluate the same predicate in Python
(``matches``).

Date bounds test containment, not overlap: ``from`` keeps listings whose
availability starts on or after it, ``to`` keeps listings whose availability
ends on or before it.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from staybook.core.errors import ValidationError

# Image bytes never leave the store on list/search paths
LISTING_PUBLIC_PROJECTION = {"_id": 0, "image.data": 0}


def as_utc(value: datetime) -> datetime:
    # Mongo hands back naive datetimes that are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class ListingSearchFilter(BaseModel):
    location: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    bed: Optional[int] = None

    def to_query(self) -> dict:
        query: dict = {}
        if self.location:
            query["location"] = {"$regex": re.escape(self.location), "$options": "i"}
        if self.from_date is not None:
            query["from_date"] = {"$gte": self.from_date}
        if self.to_date is not None:
            query["to_date"] = {"$lte": self.to_date}
        if self.bed is not None:
            query["bed"] = self.bed
        return query

    def matches(self, listing: Mapping[str, Any]) -> bool:
        """Reference predicate for ``to_query``.

        Requests never call this; the store runs ``to_query``. The search tests
        check the query's results against it.
        """
        if self.location and self.location.lower() not in str(listing.get("location", "")).lower():
            return False
        if self.from_date is not None:
            start = listing.get("from_date")
            if start is None or as_utc(start) < as_utc(self.from_date):
                return False
        if self.to_date is not None:
            end = listing.get("to_date")
            if end is None or as_utc(end) > as_utc(self.to_date):
                return False
        if self.bed is not None and listing.get("bed") != self.bed:
            return False
        return True


def _parse_date(value: Union[str, date, datetime, None], field: str) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"Invalid date for '{field}': {value!r}")


def _parse_bed(value: Union[str, int, None]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("Invalid bed count")
    if isinstance(value, int):
        bed = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            bed = int(text)
        except ValueError:
            raise ValidationError(f"Invalid bed count: {value!r}")
    if bed < 0:
        raise ValidationError("Bed count cannot be negative")
    return bed


def build_listing_filter(
    location: Optional[str] = None,
    from_: Union[str, date, datetime, None] = None,
    to: Union[str, date, datetime, None] = None,
    bed: Union[str, int, None] = None,
) -> ListingSearchFilter:
    term = location.strip() if location else None
    return ListingSearchFilter(
        location=term or None,
        from_date=_parse_date(from_, "from"),
        to_date=_parse_date(to, "to"),
        bed=_parse_bed(bed),
    )
