# Standard library imports
import logging

# Third-party imports
import certifi
import requests
from jsonschema import ValidationError, validate

# Local application imports
from config import BACKEND_TIMEOUT, BACKEND_URL
from schema.location_schema import BACKEND_LOCATION_SCHEMA, BACKEND_RESPONSE_SCHEMA

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The external location backend failed or returned unexpected data."""


class InvalidLocationError(BackendError):
    """A location record does not match the backend schema."""


def fetch_locations(session=None, url=BACKEND_URL):
    http = session or requests
    try:
        response = http.get(url, timeout=BACKEND_TIMEOUT, verify=certifi.where())
        response.raise_for_status()  # Raise an exception for HTTP errors
        payload = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Error fetching locations from backend: {e}")
        raise BackendError(f"Failed to fetch locations: {e}") from e
    except ValueError as e:
        raise BackendError(f"Backend returned invalid JSON: {e}") from e

    try:
        validate(instance=payload, schema=BACKEND_RESPONSE_SCHEMA)
    except ValidationError as e:
        raise BackendError(f"Unexpected backend response: {e.message}") from e

    return payload["data"]


def submit_location(record, session=None, url=BACKEND_URL):
    try:
        validate(instance=record, schema=BACKEND_LOCATION_SCHEMA)
    except ValidationError as e:
        raise InvalidLocationError(f"Invalid location record: {e.message}") from e

    http = session or requests
    try:
        response = http.post(
            url, json=record, timeout=BACKEND_TIMEOUT, verify=certifi.where()
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.error(f"Error submitting location to backend: {e}")
        raise BackendError(f"Failed to submit location: {e}") from e

    logger.info(f"Submitted location '{record['nama_tempat']}' to backend")
    return record
