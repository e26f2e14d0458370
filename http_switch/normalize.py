"""Driver-agnostic option normalization.

Options arrive as a loose mapping whose keys may be spelled ``baseUri``,
``base_uri`` or ``base-uri``. Normalization collapses them into one
canonical snake_case spelling, resolves alias groups to a single key and
reshapes ``auth`` and ``proxy`` so every driver adapter sees the same
shape.
"""

from __future__ import annotations

import re
from typing import Any, Mapping
from urllib.parse import unquote, urlsplit, urlunsplit

from .models import InvalidArgument

# canonical key -> source keys, highest priority first
ALIAS_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("uri", ("uri", "base_uri")),
    ("query", ("uri_query", "query")),
    ("data", ("data", "body")),
    ("follow_redirects", ("follow_redirects", "allow_redirects")),
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def canonical_key(name: str) -> str:
    """Convert an option name to its snake_case spelling.

    Examples:
        >>> canonical_key("baseUri")
        'base_uri'
        >>> canonical_key("download-dir")
        'download_dir'
    """
    return _CAMEL_BOUNDARY.sub("_", str(name)).replace("-", "_").lower()


def canonicalize(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of options with every key in canonical spelling."""
    return {canonical_key(key): value for key, value in (options or {}).items()}


def pop_first(options: dict[str, Any], keys: tuple[str, ...]) -> Any:
    """Remove all keys from options and return the first non-None value."""
    value = None
    for key in keys:
        candidate = options.pop(key, None)
        if value is None and candidate is not None:
            value = candidate
    return value


def resolve_aliases(options: dict[str, Any]) -> dict[str, Any]:
    """Collapse every alias group into its canonical key, in place.

    A group with no value leaves no key behind, so drivers can tell
    "absent" from "present but empty".
    """
    for canonical, sources in ALIAS_GROUPS:
        value = pop_first(options, sources)
        if value is not None:
            options[canonical] = value
    return options


def _split_url(uri: Any):
    try:
        parts = urlsplit(str(uri))
        parts.port  # validates the port range
    except ValueError as e:
        raise InvalidArgument(f"Malformed base URI {uri!r}: {e}") from e
    return parts


def extract_base_uri(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Split embedded credentials out of the configured base URI.

    ``uri`` and ``base_uri`` are collapsed into ``base_uri``. When no
    ``auth`` is configured, the URI is parsed, rebuilt without its userinfo
    and any embedded user/password becomes ``auth = (user, password)``.

    Args:
        options: Base client options.

    Returns:
        Canonicalized copy of options.

    Raises:
        InvalidArgument: If the URI cannot be parsed.
    """
    result = canonicalize(options)
    uri = pop_first(result, ("uri", "base_uri"))
    if uri is None:
        return result

    if result.get("auth") is not None:
        result["base_uri"] = uri
        return result

    parts = _split_url(uri)
    host = parts.netloc.rpartition("@")[2]
    result["base_uri"] = urlunsplit(
        (parts.scheme, host, parts.path, parts.query, parts.fragment)
    )
    if parts.username:
        result["auth"] = (unquote(parts.username), unquote(parts.password or ""))
    return result


def join_uri(base: Any, uri: Any) -> Any:
    """Resolve a call URI against the base URI.

    The base path is kept and the call path appended to it, so
    ``https://host/v1`` + ``/items`` is ``https://host/v1/items``.
    Absolute URIs are returned unchanged; a scheme-relative one takes the
    base scheme.

    Examples:
        >>> join_uri("https://host/v1", "items?page=2")
        'https://host/v1/items?page=2'
        >>> join_uri("https://host/v1/", "?page=2")
        'https://host/v1/?page=2'
    """
    if not base or uri is None or uri == base:
        return uri
    ref = urlsplit(str(uri))
    if ref.scheme:
        return uri
    if not any(ref):
        return base
    parts = urlsplit(str(base))
    if ref.netloc:
        return urlunsplit((parts.scheme, *ref[1:]))
    path = parts.path
    if ref.path:
        path = path.rstrip("/") + "/" + ref.path.lstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, ref.query, ref.fragment))


def normalize_auth(auth: Any) -> Any:
    """Convert a positional ``(username, password)`` pair to named fields.

    A mapping is returned untouched.
    """
    if isinstance(auth, Mapping):
        return auth
    try:
        username, password = auth
    except (TypeError, ValueError):
        raise InvalidArgument(
            "auth must be a (username, password) pair or a mapping"
        ) from None
    return {"username": username, "password": password}


def select_proxy(proxy: Any, url: Any = None) -> Any:
    """Reduce a per-scheme proxy mapping to one proxy URL.

    Keys matching the target scheme win (``"https"`` or ``"https://"``),
    then ``"all"``/``"all://"``. Otherwise the first value in iteration
    order is used.
    """
    if not isinstance(proxy, Mapping):
        return proxy
    if not proxy:
        return None

    scheme = urlsplit(str(url)).scheme.lower() if url else ""
    keys = (scheme, f"{scheme}://") if scheme else ()
    for key in (*keys, "all", "all://"):
        if proxy.get(key):
            return proxy[key]
    return next(iter(proxy.values()))


def normalize(defaults: Any, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Merge per-call options over client defaults and normalize the result.

    Args:
        defaults: ClientDefaults, or a plain mapping of base options.
        overrides: Per-call options. They win over defaults per key.

    Returns:
        Fresh option dict with canonical keys, one key per alias group,
        an upper-cased ``method``, named-field ``auth`` and a scalar
        ``proxy``. A relative ``uri`` is already joined to the base URI,
        so drivers never resolve it themselves.
    """
    base = canonicalize(getattr(defaults, "options", defaults))
    config = dict(base)
    config.update(canonicalize(overrides))
    base_uri = config.get("base_uri")
    resolve_aliases(config)
    if "uri" in config:
        config["uri"] = join_uri(base_uri, config["uri"])

    config["method"] = str(config.get("method") or "GET").upper()

    if config.get("auth") is not None:
        config["auth"] = normalize_auth(config["auth"])

    if isinstance(config.get("proxy"), Mapping):
        config["proxy"] = select_proxy(config["proxy"], config.get("uri"))

    return config
