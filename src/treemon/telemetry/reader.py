"""Decode collector responses."""
from __future__ import annotations

import logging
from contextlib import closing

import requests
from pydantic import ValidationError

from ..logging_config import WIRE_LOGGER_NAME
from ..errors import ResponseParseError, ResponseReadError
from .models import TelemetryResponse

LOGGER = logging.getLogger(__name__)
WIRE_LOGGER = logging.getLogger(WIRE_LOGGER_NAME)


def read_response(raw: requests.Response) -> TelemetryResponse:
    """Read the body of ``raw`` and parse it.

    The connection is released whether reading or parsing succeeds or not.

    Raises:
        ResponseReadError: if the body cannot be read.
        ResponseParseError: if the body is not a valid response document.
    """

    with closing(raw):
        LOGGER.debug("Reading telemetry response (status %s)", raw.status_code)
        try:
            body = raw.content
        except (requests.RequestException, OSError) as exc:
            raise ResponseReadError("read_response", str(exc)) from exc

        WIRE_LOGGER.debug("collector --> client: %r", body)

        try:
            return TelemetryResponse.model_validate_json(body)
        except ValidationError as exc:
            raise ResponseParseError("read_response", str(exc)) from exc
