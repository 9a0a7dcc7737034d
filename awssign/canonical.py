"""
Canonical request construction.

A canonical request is six newline-separated segments::

    METHOD
    /canonical/uri
    canonical=query&string=
    host:example.amazonaws.com
    x-amz-date:20200101T000000Z

    host;x-amz-date
    <hex sha256 of the body>

Both sides of the exchange must build exactly the same text, so every
function here is deterministic and independent of the order in which headers
and query parameters were supplied.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from .exceptions import MalformedRequestError
from .hashing import EMPTY_SHA256, sha256_hex
from .request import HeaderMap, SignableRequest

AMZ_DATE_HEADER = 'x-amz-date'
AMZ_DATE_FORMAT = '%Y%m%dT%H%M%SZ'
DATE_STAMP_FORMAT = '%Y%m%d'


def uri_encode(value: str) -> str:
    """Percent-encode everything except the RFC 3986 unreserved characters."""
    return quote(value, safe='-_.~')


def to_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None or timestamp.utcoffset() is None:
        raise MalformedRequestError(f"Signing timestamp must be timezone-aware, got {timestamp!r}")
    return timestamp.astimezone(timezone.utc)


def format_amz_date(timestamp: datetime) -> str:
    return to_utc(timestamp).strftime(AMZ_DATE_FORMAT)


def format_date_stamp(timestamp: datetime) -> str:
    return to_utc(timestamp).strftime(DATE_STAMP_FORMAT)


def canonical_uri(path: str) -> str:
    """
    Encode each path segment on its own and rejoin with ``/``.

    The path is used as given, so escapes already present in it are encoded a
    second time (``%20`` becomes ``%2520``).
    """
    if not path:
        return '/'
    return '/'.join(uri_encode(segment) for segment in path.split('/'))


def canonical_query_string(query_params: Iterable[Tuple[str, str]]) -> str:
    values_by_key: Dict[str, List[str]] = {}
    for key, value in query_params:
        # comma separated values count as repeated parameters
        values_by_key.setdefault(key, []).extend(value.split(','))

    pairs = []
    for key in sorted(values_by_key, key=uri_encode):
        encoded_key = uri_encode(key)
        for value in sorted(values_by_key[key]):
            pairs.append(f"{encoded_key}={uri_encode(value)}")
    return '&'.join(pairs)


def _merged_headers(headers: HeaderMap) -> List[Tuple[str, str]]:
    merged: Dict[str, List[str]] = {}
    for name, value in headers.fields():
        merged.setdefault(name.lower(), []).append(value.strip())
    return [(name, ','.join(merged[name])) for name in sorted(merged)]


def canonical_headers(headers: HeaderMap) -> str:
    """One ``name:value`` line per distinct header, each terminated by a newline."""
    return ''.join(f"{name}:{value}\n" for name, value in _merged_headers(headers))


def signed_headers(headers: HeaderMap) -> str:
    return ';'.join(name for name, _ in _merged_headers(headers))


def payload_hash(body: Optional[bytes]) -> str:
    if not body:
        return EMPTY_SHA256
    return sha256_hex(body)


def stage_headers(request: SignableRequest, amz_date: str) -> HeaderMap:
    """
    Return a copy of the request headers with ``Host`` and ``x-amz-date`` filled in.

    ``Host`` is only added when the request has none; ``x-amz-date`` always
    carries the signing time.
    """
    headers = request.headers.copy()
    if 'host' not in headers:
        if not request.host:
            raise MalformedRequestError("Request has neither a Host header nor a target host")
        headers['Host'] = request.host
    headers[AMZ_DATE_HEADER] = amz_date
    return headers


def build_canonical_request(
        method: str,
        path: str,
        query_params: Iterable[Tuple[str, str]],
        headers: HeaderMap,
        body: Optional[bytes]
) -> Tuple[str, str]:
    """
    Build the canonical request for an already staged set of headers.

    :return: tuple of (canonical request, signed headers list)
    """
    signed = signed_headers(headers)
    canonical_request = '\n'.join([
        method,
        canonical_uri(path),
        canonical_query_string(query_params),
        canonical_headers(headers),
        signed,
        payload_hash(body),
    ])
    return canonical_request, signed
