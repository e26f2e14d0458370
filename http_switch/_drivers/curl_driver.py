"""curl_cffi-based driver (the primary engine)."""

from __future__ import annotations

from typing import Any

from curl_cffi import CurlError
from curl_cffi.requests import Session

from ..config import Driver
from .base import DriverAdapter, auth_pair

DEFAULT_IMPERSONATE = "chrome120"

# canonical option -> Session.request keyword
REQUEST_OPTIONS = {
    "query": "params",
    "data": "data",
    "json": "json",
    "headers": "headers",
    "cookies": "cookies",
    "files": "files",
    "auth": "auth",
    "timeout": "timeout",
    "follow_redirects": "allow_redirects",
    "max_redirects": "max_redirects",
    "proxy": "proxy",
    "verify": "verify",
    "impersonate": "impersonate",
    "http_version": "http_version",
    "referer": "referer",
}

# canonical option -> Session constructor keyword
ENGINE_OPTIONS = {
    "impersonate": "impersonate",
    "verify": "verify",
    "timeout": "timeout",
    "trust_env": "trust_env",
    "http_version": "http_version",
    "cert": "cert",
}


class CurlAdapter(DriverAdapter):
    """curl_cffi wrapper with browser impersonation.

    Canonical options are handed to ``Session.request`` nearly verbatim;
    only a few names differ (``query`` -> ``params``, ``follow_redirects``
    -> ``allow_redirects``) and named-field auth becomes a pair. Options
    with a None value are not forwarded so Session defaults still apply.
    Request hooks (``before``) are not supported by this engine.
    """

    name = Driver.CURL
    transport_errors = (CurlError,)

    def create_engine(self) -> Session:
        """Create a curl_cffi Session from the client defaults."""
        kwargs: dict[str, Any] = {"impersonate": DEFAULT_IMPERSONATE}
        for option, keyword in ENGINE_OPTIONS.items():
            if self._defaults.get(option) is not None:
                kwargs[keyword] = self._defaults[option]
        return Session(**kwargs)

    def build_options(self, config: dict[str, Any]) -> dict[str, Any]:
        """Map canonical options to ``Session.request`` keywords."""
        kwargs: dict[str, Any] = {}
        for option, keyword in REQUEST_OPTIONS.items():
            value = config.get(option)
            if value is not None:
                kwargs[keyword] = value

        if "auth" in kwargs:
            kwargs["auth"] = auth_pair(kwargs["auth"])
        return kwargs

    def send(self, engine: Session, config: dict[str, Any]) -> Any:
        """Execute one request on a curl_cffi Session."""
        return engine.request(
            config.get("method", "GET"),
            self.target(config),
            **self.build_options(config),
        )
