"""One-shot SHA-256 and HMAC-SHA256 helpers.

Every call builds its own hash object, so nothing is shared between
concurrent signing calls.
"""

import hashlib
import hmac
from typing import Union

BytesLike = Union[str, bytes]


def _to_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    return data


def sha256_hex(data: BytesLike) -> str:
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def hmac_sha256(key: bytes, msg: BytesLike) -> bytes:
    return hmac.new(key, _to_bytes(msg), hashlib.sha256).digest()


def hmac_sha256_hex(key: bytes, msg: BytesLike) -> str:
    return hmac.new(key, _to_bytes(msg), hashlib.sha256).hexdigest()


EMPTY_SHA256 = sha256_hex(b'')
