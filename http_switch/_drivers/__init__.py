"""Internal driver adapters, one per supported engine."""

from __future__ import annotations

from ..config import Driver
from ..models import UnsupportedDriver
from .base import DriverAdapter
from .curl_driver import CurlAdapter
from .httpx_driver import HttpxAdapter

ADAPTERS: dict[Driver, type[DriverAdapter]] = {
    CurlAdapter.name: CurlAdapter,
    HttpxAdapter.name: HttpxAdapter,
}


def get_adapter_class(driver: Driver | str) -> type[DriverAdapter]:
    """Look up the adapter class for a driver identity.

    Raises:
        UnsupportedDriver: If the driver is unknown or has no adapter.
    """
    resolved = Driver.parse(driver)
    try:
        return ADAPTERS[resolved]
    except KeyError:
        raise UnsupportedDriver(resolved) from None


__all__ = [
    "ADAPTERS",
    "DriverAdapter",
    "CurlAdapter",
    "HttpxAdapter",
    "get_adapter_class",
]
