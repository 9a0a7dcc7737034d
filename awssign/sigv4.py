"""AWS Signature Version 4 request signer."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Union

from . import canonical
from .exceptions import InvalidArgumentError, MalformedRequestError
from .hashing import hmac_sha256_hex, sha256_hex
from .keys import credential_scope, derive_signing_key
from .request import HeaderSource, Headers, HttpRequest, SignableRequest

logger = logging.getLogger(__name__)

ALGORITHM = 'AWS4-HMAC-SHA256'
AUTHORIZATION_HEADER = 'Authorization'

Clock = Callable[[], datetime]


class Service(str, Enum):
    """Signing names of commonly used services. Any non-empty string is accepted as well."""
    API_GATEWAY = 'apigateway'
    DYNAMODB = 'dynamodb'
    EC2 = 'ec2'
    EXECUTE_API = 'execute-api'
    IAM = 'iam'
    LAMBDA = 'lambda'
    SQS = 'sqs'
    STS = 'sts'


@dataclass(frozen=True)
class Credentials:
    access_key: str
    secret_key: str

    def __post_init__(self) -> None:
        if not self.access_key:
            raise InvalidArgumentError("access_key must not be empty")
        if not self.secret_key:
            raise InvalidArgumentError("secret_key must not be empty")

    def __repr__(self) -> str:
        return f"Credentials(access_key={self.access_key!r}, secret_key='***')"


@dataclass(frozen=True)
class SigningResult:
    """What one call to :meth:`SigV4Signer.sign` computed. Useful when debugging signature mismatches."""
    amz_date: str
    credential_scope: str
    canonical_request: str
    string_to_sign: str
    signed_headers: str
    signature: str
    authorization: str


def _service_name(service: Union[str, Service]) -> str:
    return service.value if isinstance(service, Service) else service


class SigV4Signer:
    """
    Signs requests with a single long-lived credential.

    The signer keeps no per-request state, so one instance can sign
    independent requests from several threads at once.

    :param access_key: access key id, sent in clear in the Authorization header
    :param secret_key: secret access key, only ever used to derive signing keys
    :param clock: returns the current time; defaults to ``datetime.now(timezone.utc)``
    """

    def __init__(self, access_key: str, secret_key: str, clock: Optional[Clock] = None) -> None:
        self._credentials = Credentials(access_key, secret_key)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def access_key(self) -> str:
        return self._credentials.access_key

    def sign(
            self,
            request: SignableRequest,
            service: Union[str, Service],
            region: str,
            timestamp: Optional[datetime] = None
    ) -> SigningResult:
        """
        Sign ``request`` in place.

        Adds ``x-amz-date`` and ``Authorization`` headers, and ``Host`` when the
        request has none. Nothing is written to the request unless signing
        succeeds.

        :raises InvalidArgumentError: if ``request`` is None or ``service``/``region`` is empty
        :raises MalformedRequestError: if the request is already signed or the timestamp is naive
        """
        service_name = _service_name(service)
        if request is None:
            raise InvalidArgumentError("request must not be None")
        if not service_name:
            raise InvalidArgumentError("service must not be empty")
        if not region:
            raise InvalidArgumentError("region must not be empty")
        if AUTHORIZATION_HEADER in request.headers:
            raise MalformedRequestError("Request already carries an Authorization header")

        now = timestamp if timestamp is not None else self._clock()
        amz_date = canonical.format_amz_date(now)
        date_stamp = canonical.format_date_stamp(now)

        headers = canonical.stage_headers(request, amz_date)
        canonical_request, signed_headers = canonical.build_canonical_request(
            request.method,
            request.path,
            request.query_params,
            headers,
            request.body,
        )
        logger.debug("Canonical request:\n%s", canonical_request)

        scope = credential_scope(date_stamp, region, service_name)
        string_to_sign = '\n'.join([ALGORITHM, amz_date, scope, sha256_hex(canonical_request)])
        logger.debug("String to sign:\n%s", string_to_sign)

        signing_key = derive_signing_key(self._credentials.secret_key, date_stamp, region, service_name)
        signature = hmac_sha256_hex(signing_key, string_to_sign)
        authorization = (
            f"{ALGORITHM} Credential={self._credentials.access_key}/{scope}, "
            f"SignedHeaders={signed_headers}, Signature={signature}"
        )

        if 'host' not in request.headers:
            request.headers['Host'] = headers['host']
        request.headers[canonical.AMZ_DATE_HEADER] = amz_date
        request.headers[AUTHORIZATION_HEADER] = authorization
        logger.debug("Signed %s request for %s with scope %s", request.method, request.host, scope)

        return SigningResult(
            amz_date=amz_date,
            credential_scope=scope,
            canonical_request=canonical_request,
            string_to_sign=string_to_sign,
            signed_headers=signed_headers,
            signature=signature,
            authorization=authorization,
        )

    def create_headers(
            self,
            method: str,
            url: str,
            headers: HeaderSource = None,
            body: Optional[Union[str, bytes]] = None,
            *,
            service: Union[str, Service],
            region: str
    ) -> Headers:
        """Sign a request described by ``url`` and return every header it should be sent with."""
        request = HttpRequest.from_url(method, url, headers, body)
        self.sign(request, service, region)
        return dict(request.headers)
