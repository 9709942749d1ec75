"""Exceptions raised by the Yelp Fusion client."""


class YelpFusionError(RuntimeError):
    """Base exception for all yelp-fusion errors."""


class ConfigError(YelpFusionError):
    """Raised when mandatory configuration is missing."""


class ValidationError(YelpFusionError, ValueError):
    """Raised when request arguments are rejected before any network call."""


class MissingLocationError(ValidationError):
    def __init__(self) -> None:
        super().__init__("missing required fields: location or (latitude and longitude)")


class ConflictingOpenFilterError(ValidationError):
    def __init__(self) -> None:
        super().__init__("cannot set both open_at and open_now parameters")


class PhoneNumberRequiredError(ValidationError):
    def __init__(self) -> None:
        super().__init__("phone number is required")


class YelpFusionHTTPError(YelpFusionError):
    """Raised when the Fusion API answers with an unexpected status code.

    The message is the status line text, e.g. ``"404 Not Found"``.
    """

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason or ""
        self.status = f"{status_code} {self.reason}".strip()
        super().__init__(self.status)


class ResponseDecodeError(YelpFusionError):
    """Raised when a response body is not the JSON document we expect."""
