from datetime import datetime

import pytest

from yelp_fusion.core.errors import ResponseDecodeError
from yelp_fusion.etl import transform
from yelp_fusion.models import Business, DetailedBusiness

BUSINESS = {
    "id": "WavvLdfdP6g8aZTtbBQHTw",
    "alias": "gary-danko-san-francisco",
    "name": "Gary Danko",
    "image_url": "https://s3-media2.fl.yelpcdn.com/bphoto/abc/o.jpg",
    "is_closed": False,
    "url": "https://www.yelp.com/biz/gary-danko-san-francisco",
    "review_count": 5296,
    "categories": [{"alias": "newamerican", "title": "American (New)"}],
    "rating": 4.5,
    "coordinates": {"latitude": 37.80587, "longitude": -122.42058},
    "transactions": ["delivery"],
    "price": "$$$$",
    "location": {
        "address1": "800 N Point St",
        "address2": "",
        "address3": None,
        "city": "San Francisco",
        "zip_code": "94109",
        "country": "US",
        "state": "CA",
        "display_address": ["800 N Point St", "San Francisco, CA 94109"],
        "cross_streets": "",
    },
    "phone": "+14157492060",
    "display_phone": "(415) 749-2060",
    "distance": 12.5,
}


def test_to_business_maps_wire_fields():
    business = transform.to_business(BUSINESS)

    assert isinstance(business, Business)
    assert business.id == "WavvLdfdP6g8aZTtbBQHTw"
    assert business.review_count == 5296
    assert business.display_phone == "(415) 749-2060"
    assert business.categories[0].title == "American (New)"
    assert business.coordinates.latitude == pytest.approx(37.80587)
    assert business.location.zip_code == "94109"
    assert business.location.display_address == ("800 N Point St", "San Francisco, CA 94109")
    assert business.transactions == ("delivery",)
    assert business.is_closed is False


def test_to_business_tolerates_missing_fields():
    business = transform.to_business({"id": "abc"})

    assert business.coordinates is None
    assert business.location is None
    assert business.categories == ()
    assert business.review_count == 0


def test_to_detailed_business():
    payload = dict(
        BUSINESS,
        is_claimed=True,
        photos=["https://example.com/1.jpg"],
        hours=[
            {
                "open": [
                    {"is_overnight": False, "start": "1730", "end": "2200", "day": 0},
                    {"is_overnight": True, "start": "1730", "end": "0200", "day": 5},
                ],
                "hours_type": "REGULAR",
                "is_open_now": True,
            }
        ],
        attributes={"business_temp_closed": None, "menu_url": "https://example.com/menu", "wifi": ["free"]},
    )

    details = transform.to_detailed_business(payload)

    assert isinstance(details, DetailedBusiness)
    assert details.name == "Gary Danko"
    assert details.phone == "+14157492060"
    assert details.is_claimed is True
    assert details.photos == ("https://example.com/1.jpg",)
    assert details.hours[0].hours_type == "REGULAR"
    assert details.hours[0].is_open_now is True
    assert details.hours[0].open[1].is_overnight is True
    assert details.hours[0].open[1].day == 5
    assert details.attributes["wifi"] == ["free"]
    assert details.error is None


def test_to_detailed_business_reads_migration_error():
    details = transform.to_detailed_business(
        {"error": {"code": "BUSINESS_MIGRATED", "description": "moved", "new_business_id": "new-id"}}
    )
    assert details.error.new_business_id == "new-id"


def test_to_search_data():
    data = transform.to_search_data(
        {"total": 8228, "businesses": [BUSINESS], "region": {"center": {"latitude": 37.7, "longitude": -122.4}}}
    )

    assert data.total == 8228
    assert len(data.businesses) == 1
    assert data.businesses[0].alias == "gary-danko-san-francisco"
    assert data.region["center"]["latitude"] == 37.7


REVIEWS = {
    "reviews": [
        {
            "id": "xAG4O7l-t1ubbwVAlPnDKg",
            "rating": 5,
            "user": {
                "id": "W8UK02IDdRS2GL_66fuq6w",
                "profile_url": "https://www.yelp.com/user_details?userid=W8UK02IDdRS2GL_66fuq6w",
                "image_url": None,
                "name": "Ella A.",
            },
            "text": "Went back again to this place since the last time...",
            "time_created": "2016-08-29 00:41:13",
            "url": "https://www.yelp.com/biz/la-palma-mexicatessen-san-francisco?hrid=hp8hAJ-AnlpqxCCu7kyCWA",
        }
    ],
    "total": 3,
    "possible_languages": ["en"],
}


def test_to_reviews_data():
    data = transform.to_reviews_data(REVIEWS)

    assert data.total == 3
    assert data.possible_languages == ("en",)
    review = data.reviews[0]
    assert review.rating == 5
    assert review.user.name == "Ella A."
    assert review.user.image_url is None
    assert review.time_created == datetime(2016, 8, 29, 0, 41, 13)
    assert data.error is None


def test_to_reviews_data_migration_only_when_moved():
    payload = {"error": {"code": "BUSINESS_MIGRATED", "description": "moved", "new_business_id": "new-id"}}

    moved = transform.to_reviews_data(payload, moved=True)
    assert moved.error.code == "BUSINESS_MIGRATED"
    assert moved.error.new_business_id == "new-id"
    assert moved.reviews == ()

    assert transform.to_reviews_data(payload).error is None


def test_parse_time_created_accepts_iso_format():
    assert transform.parse_time_created("2016-08-29T00:41:13") == datetime(2016, 8, 29, 0, 41, 13)
    assert transform.parse_time_created(None) is None


def test_parse_time_created_rejects_garbage():
    with pytest.raises(ResponseDecodeError):
        transform.parse_time_created("yesterday")


@pytest.mark.parametrize("payload", [[], "text", None, 42])
def test_non_object_payload_is_a_decode_error(payload):
    with pytest.raises(ResponseDecodeError):
        transform.to_search_data(payload)


def test_wrong_nested_shape_is_a_decode_error():
    with pytest.raises(ResponseDecodeError):
        transform.to_search_data({"total": 1, "businesses": {"id": "abc"}})


@pytest.mark.parametrize("rating", ["five", [4], 4.5, True])
def test_review_rating_must_be_an_integer(rating):
    with pytest.raises(ResponseDecodeError):
        transform.to_reviews_data({"reviews": [{"id": "r1", "rating": rating}]})


@pytest.mark.parametrize("display_address", ["800 N Point St", ["800 N Point St", 7], {"line": "x"}])
def test_display_address_must_be_a_list_of_strings(display_address):
    with pytest.raises(ResponseDecodeError):
        transform.to_location({"display_address": display_address})


def test_string_lists_must_be_arrays():
    with pytest.raises(ResponseDecodeError):
        transform.to_reviews_data({"possible_languages": "en"})
    with pytest.raises(ResponseDecodeError):
        transform.to_detailed_business({"photos": "https://example.com/1.jpg"})


@pytest.mark.parametrize("flag", ["false", "true", 1])
def test_flags_must_be_booleans(flag):
    with pytest.raises(ResponseDecodeError):
        transform.to_business({"id": "abc", "is_closed": flag})
    with pytest.raises(ResponseDecodeError):
        transform.to_hours({"open": [{"day": 0, "is_overnight": flag}]})


def test_counts_must_be_integers():
    with pytest.raises(ResponseDecodeError):
        transform.to_search_data({"total": "12", "businesses": []})
    with pytest.raises(ResponseDecodeError):
        transform.to_business({"id": "abc", "review_count": "many"})
