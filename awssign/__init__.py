"""
AWS Signature Version 4 - Standalone Implementation

This package signs HTTP requests with AWS Signature Version 4 (header-based
authorization) without depending on botocore or any HTTP client library.
"""

from .exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    MalformedRequestError,
    SigningError,
)
from .request import HeaderMap, Headers, HttpRequest, SignableRequest
from .sigv4 import ALGORITHM, Credentials, Service, SigningResult, SigV4Signer

__version__ = "0.1.0"
__all__ = [
    "ALGORITHM",
    "ConfigurationError",
    "Credentials",
    "HeaderMap",
    "Headers",
    "HttpRequest",
    "InvalidArgumentError",
    "MalformedRequestError",
    "Service",
    "SignableRequest",
    "SigningError",
    "SigningResult",
    "SigV4Signer",
]
