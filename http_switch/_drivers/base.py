"""Abstract driver adapter shared by every engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, ClassVar, Iterator, Mapping
from urllib.parse import urlsplit

from ..config import Driver
from ..models import InvalidArgument


class DriverAdapter(ABC):
    """Translate normalized options into one engine's call and run it.

    Subclasses implement :meth:`create_engine` and :meth:`send`. Engine
    lifecycle is handled here: in session mode one engine is created on
    first use and kept until :meth:`close`; otherwise every call gets a
    fresh engine that is closed on every exit path.
    """

    name: ClassVar[Driver]

    # Engine exceptions that mean "the call failed", as opposed to bugs.
    transport_errors: ClassVar[tuple[type[Exception], ...]] = ()

    def __init__(
        self,
        defaults: Mapping[str, Any] | None = None,
        session: bool = False,
    ):
        """Initialize adapter.

        Args:
            defaults: Canonical base options of the owning client.
            session: Whether to reuse one engine across calls.
        """
        self._defaults = dict(defaults or {})
        self._session = session
        self._engine: Any = None

    @property
    def session(self) -> bool:
        """Whether this adapter reuses one engine across calls."""
        return self._session

    @property
    def engine(self) -> Any:
        """The session engine, or None if not created (or not in session mode)."""
        return self._engine

    @abstractmethod
    def create_engine(self) -> Any:
        """Build a new engine from the client defaults."""
        raise NotImplementedError

    @abstractmethod
    def send(self, engine: Any, config: dict[str, Any]) -> Any:
        """Execute one request on engine and return the engine's response."""
        raise NotImplementedError

    def close_engine(self, engine: Any) -> None:
        """Release an engine."""
        engine.close()

    @contextmanager
    def _engine_scope(self) -> Iterator[Any]:
        if self._session:
            if self._engine is None:
                self._engine = self.create_engine()
            yield self._engine
            return

        engine = self.create_engine()
        try:
            yield engine
        finally:
            self.close_engine(engine)

    def execute(self, config: dict[str, Any]) -> Any:
        """Run a normalized request and return the raw engine response.

        Args:
            config: Output of :func:`http_switch.normalize.normalize`.

        Returns:
            Engine response object.
        """
        with self._engine_scope() as engine:
            raw = self.send(engine, config)

        download_dir = config.get("download_dir")
        if download_dir:
            save_body(raw, download_dir, config.get("uri"))
        return raw

    def close(self) -> None:
        """Close the session engine, if any."""
        if self._engine is not None:
            engine, self._engine = self._engine, None
            self.close_engine(engine)

    @staticmethod
    def target(config: Mapping[str, Any]) -> str:
        """Return the request URI.

        Raises:
            InvalidArgument: If neither a uri nor a base uri is configured.
        """
        uri = config.get("uri")
        if uri is None or uri == "":
            raise InvalidArgument("A request requires a uri or a base_uri")
        return str(uri)

    def __enter__(self) -> "DriverAdapter":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def save_body(raw: Any, destination: Any, uri: Any = None) -> Path:
    """Write a response body to disk.

    Args:
        raw: Engine response with a ``content`` attribute.
        destination: File path, or an existing directory in which case the
                     last segment of the request path names the file.
        uri: Request URI, used to name the file inside a directory.

    Returns:
        Path of the written file.
    """
    path = Path(destination)
    if path.is_dir():
        name = urlsplit(str(uri or "")).path.rstrip("/").rpartition("/")[2]
        path = path / (name or "download")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(raw.content or b"")
    return path


def is_empty(value: Any) -> bool:
    """True for None, empty strings and empty collections.

    Booleans and numbers are never empty, so ``verify=False`` survives.
    """
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def auth_pair(auth: Any) -> tuple[Any, Any] | None:
    """Turn named-field auth back into the ``(user, password)`` pair engines take."""
    if auth is None:
        return None
    if isinstance(auth, Mapping):
        return (auth.get("username", ""), auth.get("password", ""))
    return tuple(auth)
