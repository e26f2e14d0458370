"""Configuration dataclasses and enums for the HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from .models import UnsupportedDriver
from .normalize import extract_base_uri


class Driver(str, Enum):
    """Engine that performs the actual transport.

    ``PRIMARY`` and ``SECONDARY`` are aliases for the two supported engines.
    """

    CURL = "curl"
    HTTPX = "httpx"

    PRIMARY = "curl"
    SECONDARY = "httpx"

    @classmethod
    def parse(cls, value: Driver | str) -> Driver:
        """Resolve a member from itself, its value or its name (any case).

        Raises:
            UnsupportedDriver: If nothing matches.
        """
        if isinstance(value, cls):
            return value
        name = str(value).strip()
        try:
            return cls(name.lower())
        except ValueError:
            pass
        try:
            return cls[name.upper()]
        except KeyError:
            raise UnsupportedDriver(value) from None


@dataclass(frozen=True)
class ClientDefaults:
    """Base configuration shared by every request of a Client.

    Attributes:
        options: Base request options. Keys are canonicalized and the base
                 URI is split from any embedded credentials on construction.
        driver: Default driver for requests that do not name one.
        session: Reuse one long-lived engine per driver instead of creating
                 a fresh one for every request.
    """

    options: Mapping[str, Any] = field(default_factory=dict)
    driver: Driver = Driver.CURL
    session: bool = False

    def __post_init__(self) -> None:
        """Resolve the driver and parse the base URI."""
        object.__setattr__(self, "driver", Driver.parse(self.driver))
        object.__setattr__(
            self, "options", MappingProxyType(extract_base_uri(self.options))
        )

    @property
    def base_uri(self) -> str | None:
        """Base URI with credentials stripped, if one was configured."""
        return self.options.get("base_uri")
