"""HTTP client for the KLB REST API and its documentation repository."""

import json
import logging
from typing import Any

import requests
from pydantic import BaseModel

from klb_describe.config import Settings

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """The request could not be completed (DNS, connection, timeout...)."""


class ApiResponse(BaseModel):
    """Status and body of one HTTP exchange.

    `body` holds the decoded JSON, or None when the text is not JSON.
    """

    status_code: int
    body: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @classmethod
    def from_text(cls, status_code: int, text: str, parse_json: bool = True) -> "ApiResponse":
        body = None
        if parse_json:
            try:
                body = json.loads(text)
            except ValueError:
                body = None
        return cls(status_code=status_code, body=body, text=text)


class ApiClient:
    """Thin wrapper around a requests session."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.session = requests.Session()

    def _request(self, method: str, url: str, accept: str, parse_json: bool = True) -> ApiResponse:
        logger.debug("%s %s", method, url)
        try:
            r = self.session.request(method, url, headers={"Accept": accept}, timeout=self.settings.timeout)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(str(e)) from e
        logger.debug("%s %s -> %s", method, url, r.status_code)
        return ApiResponse.from_text(r.status_code, r.text, parse_json=parse_json)

    def api_url(self, api_path: str) -> str:
        return self.settings.api_base_url + api_path.lstrip("/")

    def options(self, api_path: str) -> ApiResponse:
        """Describe an endpoint (OPTIONS)."""
        return self._request("OPTIONS", self.api_url(api_path), "application/json")

    def get(self, api_path: str) -> ApiResponse:
        return self._request("GET", self.api_url(api_path), "application/json")

    def doc_url(self, file_name: str) -> str:
        return self.settings.doc_base_url + file_name.lstrip("/")

    def fetch_doc(self, file_name: str) -> ApiResponse:
        """Fetch a raw documentation file."""
        return self._request("GET", self.doc_url(file_name), "text/plain, text/markdown", parse_json=False)
