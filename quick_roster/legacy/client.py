from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from quick_roster.models.roster import RosterRequest, RosterResponse

from .adapter import transform_request, transform_response

"""HTTP client for the external scheduling service.

POSTs the translated roster request as JSON and translates the reply back.
Transport failures, non-2xx statuses and unreadable replies are returned as
an AdapterError inside RosterResult; no substitute data is ever produced.
"""

__all__ = [
    "AdapterError",
    "RosterResult",
    "LegacyRosterClient",
]

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class AdapterError(Exception):
    """The scheduling service could not produce a roster."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class RosterResult:
    """Either a RosterResponse or the AdapterError explaining why there is none."""
    response: RosterResponse | None = None
    error: AdapterError | None = None

    @classmethod
    def success(cls, response: RosterResponse) -> RosterResult:
        return cls(response=response)

    @classmethod
    def failure(cls, error: AdapterError) -> RosterResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> RosterResponse:
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


class LegacyRosterClient:
    def __init__(
        self,
        endpoint: str,
        path: str = "/generate_roster",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.path = path if path.startswith("/") else f"/{path}"
        self.timeout = timeout
        self.session = session

    @property
    def url(self) -> str:
        return f"{self.endpoint}{self.path}"

    def post(self, payload: dict[str, Any]) -> Any:
        """POST ``payload`` and return the decoded JSON body.

        Raises:
            AdapterError: network error, timeout, non-2xx status or non-JSON body
        """
        poster = self.session.post if self.session is not None else requests.post
        try:
            resp = poster(self.url, json=payload, timeout=self.timeout)
        except requests.Timeout as e:
            raise AdapterError(f"API request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise AdapterError(f"API request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            body = resp.text[:500] if resp.text else None
            raise AdapterError(
                f"API request failed: {resp.status_code} {resp.reason}",
                status_code=resp.status_code,
                body=body,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise AdapterError(f"API returned invalid JSON: {e}", status_code=resp.status_code) from e

    def generate_roster(self, request: RosterRequest) -> RosterResult:
        try:
            payload = transform_request(request)
        except ValueError as e:
            return RosterResult.failure(AdapterError(str(e)))

        logger.info(
            f"POST {self.url} jobs={len(payload['jobs'])} salesmen={len(payload['salesmen'])}"
        )
        try:
            body = self.post(payload)
            response = transform_response(body, sent_jobs=payload["jobs"])
        except AdapterError as e:
            logger.debug(f"roster request failed: {e} body={e.body!r}")
            return RosterResult.failure(e)
        except ValueError as e:
            return RosterResult.failure(AdapterError(f"unexpected response shape: {e}"))

        logger.info(
            f"roster received assigned={len(response.assigned_jobs)} "
            f"unassigned={len(response.unassigned_jobs)}"
        )
        return RosterResult.success(response)
