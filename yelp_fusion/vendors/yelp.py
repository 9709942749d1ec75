"""Client for the Yelp Fusion v3 API."""

import logging
from typing import Any, Optional, Tuple, Union
from urllib.parse import quote, quote_plus

import requests

from yelp_fusion.core.config import DEFAULT_BASE_URL, Settings, get_settings
from yelp_fusion.core.errors import ConfigError, PhoneNumberRequiredError, ResponseDecodeError, YelpFusionHTTPError
from yelp_fusion.etl import transform
from yelp_fusion.models import BusinessSearchData, DetailedBusiness, ReviewsData
from yelp_fusion.vendors.search_params import BusinessSearchParams

logger = logging.getLogger(__name__)

BUSINESSES_PATH = "/businesses"
SEARCH_PATH = BUSINESSES_PATH + "/search"
PHONE_SEARCH_PATH = SEARCH_PATH + "/phone"
REVIEWS_SUFFIX = "/reviews"

# Seconds, or a (connect, read) pair as accepted by requests.
TimeoutValue = Union[float, Tuple[float, float]]

# Per-call marker for "use the client default"; an explicit None means no deadline.
_DEFAULT: Any = object()


class YelpFusion:
    """Talks to Yelp's Fusion v3 API with a bearer API key.

    Every operation comes in two flavours: the plain method decodes the body
    into typed records, the ``*_response`` method returns the raw
    ``requests.Response``. ``timeout`` bounds a single call; when omitted the
    client default applies, and an explicit ``None`` sends the call without
    any deadline. Use the client as a context manager to close the session
    it created.

    The session is the only shared state, so one client can serve several
    threads as long as the session they share is safe to do so.
    """

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[TimeoutValue] = None,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self.api_key = api_key
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "YelpFusion":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> "YelpFusion":
        settings = settings or get_settings()
        if not settings.yelp_api_key:
            raise ConfigError("YELP_API_KEY must be set in the environment to call the Yelp Fusion API.")
        return cls(settings.yelp_api_key, session=session, timeout=settings.timeout, base_url=settings.base_url)

    def _get(self, url: str, timeout: Optional[TimeoutValue], allow_redirects: bool = True) -> requests.Response:
        effective_timeout = self.timeout if timeout is _DEFAULT else timeout
        logger.debug("GET %s timeout=%s", url, effective_timeout)
        return self.session.get(
            url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=effective_timeout,
            allow_redirects=allow_redirects,
        )

    def _business_url(self, business_id: str, suffix: str = "", locale: str = "") -> str:
        url = f"{self.base_url}{BUSINESSES_PATH}/{quote(business_id, safe='')}{suffix}"
        if locale and locale.strip():
            url = f"{url}?locale={quote_plus(locale)}"
        return url

    def search_businesses_response(
        self, params: BusinessSearchParams, timeout: Optional[TimeoutValue] = _DEFAULT
    ) -> requests.Response:
        query = params.to_query_string()
        return self._get(f"{self.base_url}{SEARCH_PATH}?{query}", timeout)

    def search_businesses(self, params: BusinessSearchParams, timeout: Optional[TimeoutValue] = _DEFAULT) -> BusinessSearchData:
        """Run a Business Search and return the matching businesses plus the total count.

        Paging is up to the caller: adjust ``params.offset``/``params.limit`` and call again.
        """
        response = self.search_businesses_response(params, timeout=timeout)
        _check_status(response, "search_businesses")
        return transform.to_search_data(_decode_json(response))

    def business_details_response(
        self, business_id: str, locale: str = "", timeout: Optional[TimeoutValue] = _DEFAULT
    ) -> requests.Response:
        return self._get(self._business_url(business_id, locale=locale), timeout)

    def business_details(
        self, business_id: str, locale: str = "", timeout: Optional[TimeoutValue] = _DEFAULT
    ) -> DetailedBusiness:
        """Fetch details for one business; a blank ``locale`` is left off the request."""
        response = self.business_details_response(business_id, locale=locale, timeout=timeout)
        _check_status(response, "business_details")
        return transform.to_detailed_business(_decode_json(response))

    def search_businesses_by_phone_response(
        self, phone: str, timeout: Optional[TimeoutValue] = _DEFAULT
    ) -> requests.Response:
        if not phone or not phone.strip():
            raise PhoneNumberRequiredError()
        return self._get(f"{self.base_url}{PHONE_SEARCH_PATH}?phone={quote_plus(phone)}", timeout)

    def search_businesses_by_phone(self, phone: str, timeout: Optional[TimeoutValue] = _DEFAULT) -> BusinessSearchData:
        """Look businesses up by phone number, which must start with ``+`` and the country code."""
        response = self.search_businesses_by_phone_response(phone, timeout=timeout)
        _check_status(response, "search_businesses_by_phone")
        return transform.to_search_data(_decode_json(response))

    def business_reviews_response(
        self, business_id: str, locale: str = "", timeout: Optional[TimeoutValue] = _DEFAULT
    ) -> requests.Response:
        # A moved business answers 301 with a JSON body we need to read.
        return self._get(self._business_url(business_id, REVIEWS_SUFFIX, locale), timeout, allow_redirects=False)

    def business_reviews(self, business_id: str, locale: str = "", timeout: Optional[TimeoutValue] = _DEFAULT) -> ReviewsData:
        """Fetch reviews for one business.

        If the business moved, the API answers 301 and the returned
        ``ReviewsData.error`` holds the ``new_business_id`` to retry with.
        The API defaults to en_US when ``locale`` is blank.
        """
        response = self.business_reviews_response(business_id, locale=locale, timeout=timeout)
        _check_status(response, "business_reviews", accepted=(200, 301))
        return transform.to_reviews_data(_decode_json(response), moved=response.status_code == 301)


def _check_status(response: requests.Response, operation: str, accepted: Tuple[int, ...] = (200,)) -> None:
    if response.status_code in accepted:
        return
    logger.warning("%s failed: status=%s %s", operation, response.status_code, response.reason)
    raise YelpFusionHTTPError(response.status_code, response.reason)


def _decode_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise ResponseDecodeError(f"response body is not valid JSON: {exc}") from exc
