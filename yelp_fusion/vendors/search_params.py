"""Query parameters for the Business Search route."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote_plus

from yelp_fusion.core.errors import ConflictingOpenFilterError, MissingLocationError, ValidationError

# Rendered in this order after the location clause; the open_now/open_at
# clause sits between price and attributes.
_FIELDS_BEFORE_OPEN = ("term", "radius", "categories", "locale", "limit", "offset", "sort_by", "price")


@dataclass
class BusinessSearchParams:
    """Options for a business search.

    ``location`` is mandatory unless both ``latitude`` and ``longitude`` are
    given. Every field defaults to ``None`` meaning "not sent", so ``0`` and
    ``False`` stay meaningful values. ``open_now`` and ``open_at`` are
    mutually exclusive.
    """

    term: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    # Meters, at most 40000 (about 25 miles).
    radius: Optional[int] = None
    categories: Optional[str] = None
    locale: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    # best_match, rating, review_count or distance.
    sort_by: Optional[str] = None
    # "1" = $ ... "4" = $$$$, combinable as "1,2,3".
    price: Optional[str] = None
    open_now: Optional[bool] = None
    # Unix timestamp.
    open_at: Optional[int] = None
    # e.g. hot_and_new, reservation, deals.
    attributes: Optional[str] = None

    def set_term(self, value: str) -> "BusinessSearchParams":
        self.term = value
        return self

    def set_location(self, value: str) -> "BusinessSearchParams":
        self.location = value
        return self

    def set_latitude(self, value: float) -> "BusinessSearchParams":
        self.latitude = value
        return self

    def set_longitude(self, value: float) -> "BusinessSearchParams":
        self.longitude = value
        return self

    def set_radius(self, value: int) -> "BusinessSearchParams":
        self.radius = value
        return self

    def set_categories(self, value: str) -> "BusinessSearchParams":
        self.categories = value
        return self

    def set_locale(self, value: str) -> "BusinessSearchParams":
        self.locale = value
        return self

    def set_limit(self, value: int) -> "BusinessSearchParams":
        self.limit = value
        return self

    def set_offset(self, value: int) -> "BusinessSearchParams":
        self.offset = value
        return self

    def set_sort_by(self, value: str) -> "BusinessSearchParams":
        self.sort_by = value
        return self

    def set_price(self, value: str) -> "BusinessSearchParams":
        self.price = value
        return self

    def set_open_now(self, value: bool) -> "BusinessSearchParams":
        self.open_now = value
        return self

    def set_open_at(self, value: int) -> "BusinessSearchParams":
        self.open_at = value
        return self

    def set_attributes(self, value: str) -> "BusinessSearchParams":
        self.attributes = value
        return self

    def to_query_string(self) -> str:
        """Render the set fields as a query string without the leading ``?``."""
        clauses: List[str] = []
        clauses.append(_location_clause(self))

        for name in _FIELDS_BEFORE_OPEN:
            value = getattr(self, name)
            if value is not None:
                clauses.append(f"{name}={_encode(value)}")

        open_clause = _open_clause(self)
        if open_clause:
            clauses.append(open_clause)

        if self.attributes is not None:
            clauses.append(f"attributes={_encode(self.attributes)}")
        return "&".join(clauses)


def _encode(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return quote_plus(str(value))


def _location_clause(params: BusinessSearchParams) -> str:
    has_coordinates = params.latitude is not None and params.longitude is not None
    if params.location is None and not has_coordinates:
        raise MissingLocationError()
    parts: List[str] = []
    if params.location is not None:
        parts.append(f"location={quote_plus(params.location)}")
    if has_coordinates:
        parts.append("latitude=%f&longitude=%f" % (params.latitude, params.longitude))
    return "&".join(parts)


def _open_clause(params: BusinessSearchParams) -> str:
    if params.open_now is not None and params.open_at is not None:
        raise ConflictingOpenFilterError()
    if params.open_now is not None:
        if not isinstance(params.open_now, bool):
            raise ValidationError(f"open_now must be a bool, got {params.open_now!r}")
        return f"open_now={_encode(params.open_now)}"
    if params.open_at is not None:
        return f"open_at={int(params.open_at)}"
    return ""
