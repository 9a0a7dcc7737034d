"""Request model consumed by the signer.

The signer only needs the handful of attributes described by
:class:`SignableRequest`; :class:`HttpRequest` is the in-memory implementation
used by the convenience APIs and the tests.
"""

from collections.abc import MutableMapping
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple, Union
from urllib.parse import parse_qsl, urlsplit

from .exceptions import MalformedRequestError

Headers = Dict[str, Any]
HeaderSource = Union[Mapping[str, Any], Iterable[Tuple[str, Any]], None]
QueryParams = List[Tuple[str, str]]

DEFAULT_PORTS = {'http': 80, 'https': 443}


class HeaderMap(MutableMapping):
    """
    Ordered, case-insensitive multimap of HTTP headers.

    Each ``(name, value)`` pair is kept in insertion order with the name's
    original case. Lookups ignore case; ``headers['X']`` returns all values for
    ``X`` joined with commas. Iteration yields each distinct name once, in the
    case it was first added.
    """

    def __init__(self, headers: HeaderSource = None) -> None:
        self._fields: List[Tuple[str, str]] = []
        if headers is None:
            return
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in pairs:
            if isinstance(value, (list, tuple)):
                for item in value:
                    self.add(name, item)
            else:
                self.add(name, value)

    def add(self, name: str, value: Any) -> None:
        """Append a value without touching existing values for ``name``."""
        if value is None:
            raise MalformedRequestError(f"Header {name!r} has no value")
        if isinstance(value, bytes):
            value = value.decode('utf-8')
        self._fields.append((name, str(value)))

    def get_all(self, name: str) -> List[str]:
        key = name.lower()
        return [value for field, value in self._fields if field.lower() == key]

    def fields(self) -> List[Tuple[str, str]]:
        """All ``(name, value)`` pairs, duplicates included."""
        return list(self._fields)

    def copy(self) -> 'HeaderMap':
        return HeaderMap(self._fields)

    def __getitem__(self, name: str) -> str:
        values = self.get_all(name)
        if not values:
            raise KeyError(name)
        return ','.join(values)

    def __setitem__(self, name: str, value: Any) -> None:
        self._remove(name)
        self.add(name, value)

    def __delitem__(self, name: str) -> None:
        if not self._remove(name):
            raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return any(field.lower() == key for field, _ in self._fields)

    def __iter__(self) -> Iterator[str]:
        seen = set()
        for field, _ in self._fields:
            key = field.lower()
            if key not in seen:
                seen.add(key)
                yield field

    def __len__(self) -> int:
        return len({field.lower() for field, _ in self._fields})

    def __repr__(self) -> str:
        return f"HeaderMap({self._fields!r})"

    def _remove(self, name: str) -> bool:
        key = name.lower()
        kept = [(field, value) for field, value in self._fields if field.lower() != key]
        removed = len(kept) != len(self._fields)
        self._fields = kept
        return removed


class SignableRequest(Protocol):
    """The parts of an HTTP request the signer reads and writes."""

    method: str
    host: str
    path: str
    query_params: Sequence[Tuple[str, str]]
    headers: HeaderMap
    body: Optional[bytes]


class HttpRequest:
    """A mutable, transport-independent HTTP request description."""

    def __init__(
            self,
            method: str,
            host: str,
            path: str = '/',
            query_params: Optional[Iterable[Tuple[str, str]]] = None,
            headers: HeaderSource = None,
            body: Optional[Union[str, bytes]] = None
    ) -> None:
        self.method = method
        self.host = host
        self.path = path
        self.query_params: QueryParams = list(query_params or [])
        self.headers = headers if isinstance(headers, HeaderMap) else HeaderMap(headers)
        self.body = body.encode('utf-8') if isinstance(body, str) else body

    @classmethod
    def from_url(
            cls,
            method: str,
            url: str,
            headers: HeaderSource = None,
            body: Optional[Union[str, bytes]] = None
    ) -> 'HttpRequest':
        """
        Build a request from an absolute URL.

        The path keeps its percent-encoding and empty segments but has its
        dot segments removed; the query string is decoded into key/value pairs.
        """
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as e:
            raise MalformedRequestError(f"Unparseable URL {url!r}: {e}") from e
        if not parts.scheme or not parts.hostname:
            raise MalformedRequestError(f"URL must be absolute with a host: {url!r}")

        return cls(
            method=method,
            host=host_header_value(parts.scheme, parts.hostname, port),
            path=remove_dot_segments(parts.path),
            query_params=parse_qsl(parts.query, keep_blank_values=True),
            headers=headers,
            body=body,
        )

    def __repr__(self) -> str:
        return f"HttpRequest({self.method} {self.host}{self.path or '/'})"


def host_header_value(scheme: str, hostname: str, port: Optional[int]) -> str:
    """Render a Host header, leaving out the scheme's default port."""
    if ':' in hostname:
        hostname = f"[{hostname}]"
    if port is None or DEFAULT_PORTS.get(scheme.lower()) == port:
        return hostname
    return f"{hostname}:{port}"


def remove_dot_segments(path: str) -> str:
    """
    Resolve ``.`` and ``..`` segments as described in RFC 3986 section 5.2.4.

    Empty segments are kept, so ``/a//b`` stays as it is.
    """
    segments = path.split('/')
    output: List[str] = []
    for segment in segments:
        if segment == '.':
            continue
        if segment == '..':
            # never pop the leading empty segment of an absolute path
            if len(output) > 1 or (output and output[0]):
                output.pop()
            continue
        output.append(segment)
    if segments[-1] in ('.', '..'):
        output.append('')
    return '/'.join(output)
