"""Typed records decoded from Yelp Fusion API responses.

Attribute names follow the on-wire JSON keys (``review_count``,
``display_address``, ``new_business_id`` ...), so a record can be compared
against the raw payload field by field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Category:
    alias: str = ""
    title: str = ""


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True, slots=True)
class Location:
    address1: Optional[str] = None
    address2: Optional[str] = None
    address3: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    display_address: Tuple[str, ...] = ()
    state: Optional[str] = None
    zip_code: Optional[str] = None
    cross_streets: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MigrationError:
    """Returned instead of data when a business moved to a new identifier.

    Callers should reissue the request with ``new_business_id``.
    """

    code: str = ""
    description: str = ""
    new_business_id: str = ""


@dataclass(frozen=True, slots=True)
class Business:
    """A business as returned by the search routes."""

    id: str = ""
    alias: str = ""
    name: str = ""
    categories: Tuple[Category, ...] = ()
    coordinates: Optional[Coordinates] = None
    display_phone: str = ""
    distance: Optional[float] = None
    image_url: str = ""
    # True only when the business closed permanently.
    is_closed: bool = False
    location: Optional[Location] = None
    # One of $, $$, $$$ or $$$$.
    price: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    url: str = ""
    transactions: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class OpenPeriod:
    # 0 is Monday; start and end are 24 hour "HHMM" strings.
    day: int = 0
    start: str = ""
    end: str = ""
    is_overnight: bool = False


@dataclass(frozen=True, slots=True)
class Hours:
    hours_type: str = ""
    open: Tuple[OpenPeriod, ...] = ()
    is_open_now: bool = False


@dataclass(frozen=True, slots=True)
class DetailedBusiness(Business):
    """Business details: every search field plus the detail-only ones."""

    phone: str = ""
    photos: Tuple[str, ...] = ()
    hours: Tuple[Hours, ...] = ()
    is_claimed: bool = False
    # Provider defined; only populated for Fusion VIP clients.
    attributes: Dict[str, Any] = field(default_factory=dict)
    error: Optional[MigrationError] = None


@dataclass(frozen=True, slots=True)
class BusinessSearchData:
    total: int = 0
    businesses: Tuple[Business, ...] = ()
    region: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class User:
    id: str = ""
    profile_url: str = ""
    image_url: Optional[str] = None
    name: str = ""


@dataclass(frozen=True, slots=True)
class Review:
    id: str = ""
    rating: int = 0
    user: User = field(default_factory=User)
    text: str = ""
    time_created: Optional[datetime] = None
    url: str = ""


@dataclass(frozen=True, slots=True)
class ReviewsData:
    """Reviews for one business.

    ``error`` is only set when the API answered 301 Moved Permanently.
    """

    total: int = 0
    possible_languages: Tuple[str, ...] = ()
    reviews: Tuple[Review, ...] = ()
    error: Optional[MigrationError] = None
