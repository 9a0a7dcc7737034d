"""Sign requests sent with the requests library."""

import logging
from typing import Union

from requests import PreparedRequest
from requests.auth import AuthBase

from .canonical import AMZ_DATE_HEADER
from .exceptions import MalformedRequestError
from .request import HttpRequest
from .sigv4 import AUTHORIZATION_HEADER, Service, SigV4Signer

logger = logging.getLogger(__name__)


class SigV4Auth(AuthBase):
    """
    ``requests`` auth hook that signs each outgoing request.

    Usage::

        auth = SigV4Auth(SigV4Signer(access_key, secret_key), 'execute-api', 'ap-northeast-1')
        requests.post(url, json={'sampleKey': 'sampleValue'}, auth=auth)

    Streamed bodies (files, generators) cannot be signed because the whole
    payload has to be hashed up front.
    """

    def __init__(self, signer: SigV4Signer, service: Union[str, Service], region: str) -> None:
        self.signer = signer
        self.service = service
        self.region = region

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        body = r.body
        if body is not None and not isinstance(body, (str, bytes)):
            raise MalformedRequestError(f"Cannot sign a streamed request body of type {type(body).__name__}")

        request = HttpRequest.from_url(r.method, r.url, list(r.headers.items()), body)
        self.signer.sign(request, self.service, self.region)

        for name in ('Host', AMZ_DATE_HEADER, AUTHORIZATION_HEADER):
            r.headers[name] = request.headers[name]
        logger.debug("Signed %s %s", r.method, r.url)
        return r
