"""httpx-based driver (the secondary engine)."""

from __future__ import annotations

from typing import Any, Callable, Mapping

import httpx

from ..config import Driver
from ..normalize import select_proxy
from .base import DriverAdapter, auth_pair, is_empty

# canonical option -> Client.build_request keyword
REQUEST_OPTIONS = {
    "query": "params",
    "json": "json",
    "headers": "headers",
    "cookies": "cookies",
    "files": "files",
    "timeout": "timeout",
    "extensions": "extensions",
}

# httpx.Client keywords taken from the client defaults
ENGINE_OPTIONS = (
    "verify",
    "cert",
    "http2",
    "timeout",
    "trust_env",
    "transport",
    "follow_redirects",
    "max_redirects",
    "proxy",
)

# engine settings a single call may change; httpx fixes them per Client
CALL_ENGINE_OPTIONS = ("verify", "cert", "http2", "trust_env", "max_redirects", "proxy")

RequestHook = Callable[[httpx.Request], "httpx.Request | None"]


def _as_hooks(before: Any) -> list[RequestHook]:
    if before is None:
        return []
    if callable(before):
        return [before]
    return list(before)


class HttpxAdapter(DriverAdapter):
    """httpx wrapper.

    Method and URI are passed positionally to ``build_request``; the rest
    of the options are renamed for httpx (``query`` -> ``params``,
    ``data`` -> ``data`` for mappings or ``content`` for raw bodies).
    ``before`` hooks run in order on the built request and may return a
    replacement. Empty options are dropped because httpx rejects keywords
    it does not know and treats None differently from "not given".
    """

    name = Driver.HTTPX
    transport_errors = (httpx.HTTPError,)

    @property
    def default_proxy(self) -> str | None:
        """Proxy the engine is built with."""
        return select_proxy(self._defaults.get("proxy"), self._defaults.get("base_uri"))

    def engine_setting(self, option: str) -> Any:
        """Value of an engine-level option in the client defaults."""
        if option == "proxy":
            return self.default_proxy
        return self._defaults.get(option)

    def create_engine(self, **overrides: Any) -> httpx.Client:
        """Create an httpx Client from the client defaults.

        Args:
            **overrides: Engine settings replacing the defaults for this
                         Client only (``verify``, ``proxy``, ...).
        """
        settings = {option: self.engine_setting(option) for option in ENGINE_OPTIONS}
        settings.update(overrides)
        return httpx.Client(
            **{option: value for option, value in settings.items() if value is not None}
        )

    def build_request(self, engine: httpx.Client, config: Mapping[str, Any]) -> httpx.Request:
        """Build the request and run ``before`` hooks on it."""
        kwargs: dict[str, Any] = {}
        for option, keyword in REQUEST_OPTIONS.items():
            if option in config:
                kwargs[keyword] = config[option]

        body = config.get("data")
        if isinstance(body, Mapping):
            kwargs["data"] = body
        elif body is not None:
            kwargs["content"] = body

        request = engine.build_request(config["method"], self.target(config), **kwargs)
        for hook in _as_hooks(config.get("before")):
            replaced = hook(request)
            if replaced is not None:
                request = replaced
        return request

    def _dispatch(self, engine: httpx.Client, config: Mapping[str, Any]) -> httpx.Response:
        send_kwargs: dict[str, Any] = {}
        if "auth" in config:
            send_kwargs["auth"] = auth_pair(config["auth"])
        if "follow_redirects" in config:
            send_kwargs["follow_redirects"] = config["follow_redirects"]
        return engine.send(self.build_request(engine, config), **send_kwargs)

    def send(self, engine: httpx.Client, config: dict[str, Any]) -> httpx.Response:
        """Execute one request on an httpx Client.

        httpx fixes proxy, TLS and redirect limits per Client, so a call
        that changes any of them gets its own short-lived Client.
        """
        options = {key: value for key, value in config.items() if not is_empty(value)}
        options.setdefault("method", "GET")

        overrides = {
            option: options[option]
            for option in CALL_ENGINE_OPTIONS
            if option in options and options[option] != self.engine_setting(option)
        }
        if overrides:
            with self.create_engine(**overrides) as client:
                return self._dispatch(client, options)
        return self._dispatch(engine, options)
