"""Turn engine responses and engine errors into one outcome type."""

from __future__ import annotations

from typing import Any

from .models import HTTPFailure, Response, TransportFailure


def _elapsed(raw: Any) -> float:
    # httpx only knows the duration once the response has been read
    try:
        elapsed = raw.elapsed
    except (AttributeError, RuntimeError):
        return 0.0
    if hasattr(elapsed, "total_seconds"):
        return elapsed.total_seconds()
    return float(elapsed or 0.0)


def _url(raw: Any) -> str:
    try:
        return str(raw.url)
    except (AttributeError, RuntimeError):
        return ""


def response_from_raw(raw: Any, driver: str | None = None) -> Response:
    """Convert an httpx or curl_cffi response to our Response model.

    httpx exposes the reason phrase as ``reason_phrase``, curl_cffi as
    ``reason``; both are accepted.

    Args:
        raw: Engine response object.
        driver: Name of the driver that produced it.

    Returns:
        Response object keeping a reference to ``raw``.
    """
    reason = getattr(raw, "reason_phrase", None) or getattr(raw, "reason", None) or ""
    content = getattr(raw, "content", None) or b""
    if isinstance(content, str):
        content = content.encode("utf-8")

    return Response(
        status_code=int(raw.status_code),
        reason=str(reason),
        headers=dict(getattr(raw, "headers", None) or {}),
        content=content,
        url=_url(raw),
        elapsed=_elapsed(raw),
        driver=driver,
        raw=raw,
    )


def finalize(raw: Any, driver: str | None = None) -> Response:
    """Wrap a completed engine response, applying the error-status policy.

    A Response is returned as is.

    Raises:
        HTTPFailure: If the status code is 400 or above.
    """
    response = raw if isinstance(raw, Response) else response_from_raw(raw, driver)
    if response.status_code >= 400:
        raise HTTPFailure(
            response.status_code,
            response.reason,
            response.text,
            response=response,
        )
    return response


def finalize_error(error: Exception, driver: str | None = None) -> Response:
    """Recover a response from an engine error, or raise TransportFailure.

    Errors that carry an HTTP response (``error.response``) continue through
    the status check in :func:`finalize`. curl_cffi also attaches a partial
    response with status 0 when the connection never completed; that counts
    as no response at all.

    Raises:
        HTTPFailure: If the carried response has status >= 400.
        TransportFailure: If the error carries no response with a status.
    """
    raw = getattr(error, "response", None)
    if raw is None or not getattr(raw, "status_code", 0):
        raise TransportFailure(
            f"Something went wrong ({error}).", original_error=error
        ) from error
    return finalize(raw, driver)
