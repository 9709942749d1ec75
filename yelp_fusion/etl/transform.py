"""Utilities for transforming Yelp Fusion JSON payloads into typed records."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from yelp_fusion.core.errors import ResponseDecodeError
from yelp_fusion.models import (
    Business,
    BusinessSearchData,
    Category,
    Coordinates,
    DetailedBusiness,
    Hours,
    Location,
    MigrationError,
    OpenPeriod,
    Review,
    ReviewsData,
    User,
)

logger = logging.getLogger(__name__)

_TIME_CREATED_FORMAT = "%Y-%m-%d %H:%M:%S"


def _require_object(payload: Any, what: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ResponseDecodeError(f"expected a JSON object for {what}, got {type(payload).__name__}")
    return payload


def _objects(values: Optional[Iterable[Any]], what: str) -> Iterable[Dict[str, Any]]:
    if values is None:
        return []
    if not isinstance(values, list):
        raise ResponseDecodeError(f"expected a JSON array for {what}, got {type(values).__name__}")
    return [_require_object(value, what) for value in values]


def _strings(values: Optional[Iterable[Any]], what: str) -> Tuple[str, ...]:
    if values is None:
        return ()
    if not isinstance(values, list) or not all(isinstance(value, str) for value in values):
        raise ResponseDecodeError(f"expected a JSON array of strings for {what}, got {values!r}")
    return tuple(values)


def _flag(value: Any, what: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ResponseDecodeError(f"expected a JSON boolean for {what}, got {value!r}")
    return value


def _integer(value: Any, what: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseDecodeError(f"expected a JSON integer for {what}, got {value!r}")
    return value


def to_migration_error(payload: Optional[Dict[str, Any]]) -> Optional[MigrationError]:
    if payload is None:
        return None
    payload = _require_object(payload, "error")
    return MigrationError(
        code=payload.get("code") or "",
        description=payload.get("description") or "",
        new_business_id=payload.get("new_business_id") or "",
    )


def to_location(payload: Optional[Dict[str, Any]]) -> Optional[Location]:
    if payload is None:
        return None
    payload = _require_object(payload, "location")
    return Location(
        address1=payload.get("address1"),
        address2=payload.get("address2"),
        address3=payload.get("address3"),
        city=payload.get("city"),
        country=payload.get("country"),
        display_address=_strings(payload.get("display_address"), "display_address"),
        state=payload.get("state"),
        zip_code=payload.get("zip_code"),
        cross_streets=payload.get("cross_streets"),
    )


def to_coordinates(payload: Optional[Dict[str, Any]]) -> Optional[Coordinates]:
    if payload is None:
        return None
    payload = _require_object(payload, "coordinates")
    return Coordinates(latitude=payload.get("latitude"), longitude=payload.get("longitude"))


def _business_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    categories = tuple(
        Category(alias=item.get("alias") or "", title=item.get("title") or "")
        for item in _objects(payload.get("categories"), "categories")
    )
    return {
        "id": payload.get("id") or "",
        "alias": payload.get("alias") or "",
        "name": payload.get("name") or "",
        "categories": categories,
        "coordinates": to_coordinates(payload.get("coordinates")),
        "display_phone": payload.get("display_phone") or "",
        "distance": payload.get("distance"),
        "image_url": payload.get("image_url") or "",
        "is_closed": _flag(payload.get("is_closed"), "is_closed"),
        "location": to_location(payload.get("location")),
        "price": payload.get("price"),
        "rating": payload.get("rating"),
        "review_count": _integer(payload.get("review_count"), "review_count"),
        "url": payload.get("url") or "",
        "transactions": _strings(payload.get("transactions"), "transactions"),
    }


def to_business(payload: Dict[str, Any]) -> Business:
    return Business(**_business_fields(_require_object(payload, "business")))


def to_hours(payload: Dict[str, Any]) -> Hours:
    periods = tuple(
        OpenPeriod(
            day=_integer(item.get("day"), "day"),
            start=item.get("start") or "",
            end=item.get("end") or "",
            is_overnight=_flag(item.get("is_overnight"), "is_overnight"),
        )
        for item in _objects(payload.get("open"), "open")
    )
    return Hours(
        hours_type=payload.get("hours_type") or "",
        open=periods,
        is_open_now=_flag(payload.get("is_open_now"), "is_open_now"),
    )


def to_detailed_business(payload: Any) -> DetailedBusiness:
    payload = _require_object(payload, "business details")
    attributes = payload.get("attributes") or {}
    return DetailedBusiness(
        **_business_fields(payload),
        phone=payload.get("phone") or "",
        photos=_strings(payload.get("photos"), "photos"),
        hours=tuple(to_hours(item) for item in _objects(payload.get("hours"), "hours")),
        is_claimed=_flag(payload.get("is_claimed"), "is_claimed"),
        attributes=_require_object(attributes, "attributes"),
        error=to_migration_error(payload.get("error")),
    )


def to_search_data(payload: Any) -> BusinessSearchData:
    payload = _require_object(payload, "business search")
    businesses = tuple(to_business(item) for item in _objects(payload.get("businesses"), "businesses"))
    return BusinessSearchData(
        total=_integer(payload.get("total"), "total"),
        businesses=businesses,
        region=payload.get("region") or {},
    )


def parse_time_created(value: Optional[str]) -> Optional[datetime]:
    """Parse ``time_created``; the API sends ``YYYY-MM-DD HH:MM:SS`` in Pacific time."""
    if not value:
        return None
    try:
        return datetime.strptime(value, _TIME_CREATED_FORMAT)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise ResponseDecodeError(f"unrecognised time_created value: {value!r}") from exc


def to_user(payload: Optional[Dict[str, Any]]) -> User:
    payload = _require_object(payload or {}, "user")
    return User(
        id=payload.get("id") or "",
        profile_url=payload.get("profile_url") or "",
        image_url=payload.get("image_url"),
        name=payload.get("name") or "",
    )


def to_review(payload: Dict[str, Any]) -> Review:
    return Review(
        id=payload.get("id") or "",
        rating=_integer(payload.get("rating"), "rating"),
        user=to_user(payload.get("user")),
        text=payload.get("text") or "",
        time_created=parse_time_created(payload.get("time_created")),
        url=payload.get("url") or "",
    )


def to_reviews_data(payload: Any, moved: bool = False) -> ReviewsData:
    """Decode a reviews payload.

    The migration ``error`` object is only read for 301 responses (``moved``);
    a successful listing never carries one.
    """
    payload = _require_object(payload, "reviews")
    reviews = tuple(to_review(item) for item in _objects(payload.get("reviews"), "reviews"))
    error = to_migration_error(payload.get("error")) if moved else None
    if error is not None:
        logger.debug("Business moved: code=%s new_business_id=%s", error.code, error.new_business_id)
    return ReviewsData(
        total=_integer(payload.get("total"), "total"),
        possible_languages=_strings(payload.get("possible_languages"), "possible_languages"),
        reviews=reviews,
        error=error,
    )
