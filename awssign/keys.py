"""Signing key derivation for AWS Signature Version 4."""

from .hashing import hmac_sha256

SCOPE_TERMINATOR = 'aws4_request'


def credential_scope(date_stamp: str, region: str, service: str) -> str:
    return f"{date_stamp}/{region}/{service}/{SCOPE_TERMINATOR}"


def derive_signing_key(secret_key: str, date_stamp: str, region: str, service: str) -> bytes:
    """
    Derive the request-scoped signing key from the secret access key.

    Each step is keyed with the raw digest of the previous one; hex-encoding an
    intermediate value produces a key AWS will not accept.

    :param secret_key: the long-lived secret access key
    :param date_stamp: UTC date in YYYYMMDD form
    :param region: region name, e.g. ``us-east-1``
    :param service: service name, e.g. ``execute-api``
    :return: the 32-byte signing key
    """
    k_date = hmac_sha256(('AWS4' + secret_key).encode('utf-8'), date_stamp)
    k_region = hmac_sha256(k_date, region)
    k_service = hmac_sha256(k_region, service)
    return hmac_sha256(k_service, SCOPE_TERMINATOR)
