"""Turn a parsed OPTIONS response into an ApiDescription."""

from typing import Any

from .base import ApiDescription, PrefixEntry

NO_DATA_MESSAGE = "No API data found in response"


class MissingDataError(ValueError):
    """The response carries no usable `data` object."""

    def __init__(self, message: str = NO_DATA_MESSAGE):
        super().__init__(message)


def extract_data(payload: Any) -> dict:
    """Return the `data` object of a response envelope."""
    if not isinstance(payload, dict):
        raise MissingDataError()
    data = payload.get("data")
    if not isinstance(data, dict) or not data:
        raise MissingDataError()
    return data


def parse_description(payload: Any) -> ApiDescription:
    """Parse a full OPTIONS response.

    Raises MissingDataError when `data` is absent and pydantic's
    ValidationError when it does not look like a description document.
    """
    return ApiDescription.model_validate(extract_data(payload))


def parse_root_objects(payload: Any) -> list[PrefixEntry]:
    """Parse the object list returned by OPTIONS on the API root."""
    data = extract_data(payload)
    if not data.get("prefix"):
        raise MissingDataError("Could not retrieve API object list")
    return ApiDescription.model_validate(data).prefix
