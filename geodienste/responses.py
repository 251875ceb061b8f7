"""
Shared interpretation of geodienste.ch responses.
"""

import json
import httpx
from schemas.geodienste import GeodiensteStatusSuccess

EXPORT_PENDING_ERROR = "Cannot start data export because there is another data export pending"


def is_success(response: httpx.Response) -> bool:
    """True for 2xx responses"""
    return response.is_success


def is_export_conflict(response: httpx.Response) -> bool:
    """
    Check whether a start response is the recoverable "export pending" conflict.

    geodienste.ch answers with 404 and a fixed error text when another export
    of the same account is still running. Any other 404 is a real failure.
    """
    if response.status_code != httpx.codes.NOT_FOUND:
        return False

    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return False

    return isinstance(body, dict) and body.get("error") == EXPORT_PENDING_ERROR


def read_status(response: httpx.Response) -> GeodiensteStatusSuccess:
    """
    Parse the body of a status.json response.

    Raises:
        pydantic.ValidationError: If the body is not a well-formed status payload
    """
    return GeodiensteStatusSuccess.model_validate_json(response.content)
