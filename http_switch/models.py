"""Response dataclass and exception taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Response:
    """Uniform HTTP response, regardless of the engine that produced it.

    Attributes:
        status_code: HTTP status code.
        reason: Reason phrase ("OK", "Not Found", ...).
        headers: Response headers.
        content: Raw response content as bytes.
        url: Final URL after redirects.
        elapsed: Request duration in seconds.
        driver: Name of the driver that executed the request.
        raw: The engine-specific response object.
    """

    status_code: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""
    url: str = ""
    elapsed: float = 0.0
    driver: str | None = None
    raw: Any = field(default=None, repr=False, compare=False)

    @property
    def text(self) -> str:
        """Decode content as UTF-8 text."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """Check if status code indicates success (< 400)."""
        return self.status_code < 400

    def json(self) -> Any:
        """Parse content as JSON."""
        import json as json_module
        return json_module.loads(self.content)


class HTTPClientError(Exception):
    """Base exception for HTTP client errors."""
    pass


class UnsupportedDriver(HTTPClientError, ValueError):
    """Requested driver identity is not recognized."""

    def __init__(self, driver: Any):
        name = getattr(driver, "value", driver)
        super().__init__(f"Not support the httpclient driver {name}")
        self.driver = name


class InvalidArgument(HTTPClientError, ValueError):
    """Malformed call, e.g. a shorthand method invoked without a URI."""
    pass


class HTTPFailure(HTTPClientError):
    """Request completed but the server answered with status >= 400."""

    def __init__(
        self,
        status_code: int,
        reason: str = "",
        body: str = "",
        response: Response | None = None,
    ):
        message = f"Something went wrong ({status_code} - {reason})."
        if body:
            message += f"\n{body}"
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.response = response


class TransportFailure(HTTPClientError):
    """Request could not complete at all (connection, timeout, etc.)."""

    status_code = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
