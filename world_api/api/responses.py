from typing import Any, List

from fastapi.responses import JSONResponse

from world_api.core.errors import envelope_response
from world_api.schemas.response import ResponseEnvelope, bad_request, not_found


def respond(envelope: ResponseEnvelope, *accepted: int) -> JSONResponse:
    """
    Send a service outcome to the client.

    Successful envelopes (2xx, plus any accepted code such as the 304 of an
    update with no changes) go out as HTTP 200. Anything else uses the
    envelope code as the HTTP status.
    """
    if envelope.is_success_status_code(*accepted):
        return envelope_response(envelope, 200)
    return envelope_response(envelope)


def listing(items: List[Any], message: str):
    """Return the items, or a 404 envelope when there are none."""
    if not items:
        return envelope_response(not_found(message))
    return items


def invalid_code(kind: str, code: str) -> JSONResponse:
    return envelope_response(bad_request(f"Invalid {kind} code ({code}). Specify a 2 or 3 letter ISO code."))


def missing(message: str) -> JSONResponse:
    return envelope_response(not_found(message))


def invalid_search(message: str) -> JSONResponse:
    return envelope_response(bad_request(message))


def invalid_id(city_id) -> JSONResponse:
    return envelope_response(bad_request(f"City id was missing or invalid. Id: {city_id!r}"))
