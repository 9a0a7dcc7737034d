"""Errors raised while signing a request."""


class SigningError(Exception):
    """Base class for every error raised by awssign."""


class InvalidArgumentError(SigningError, ValueError):
    """A required argument (credential, service, region, request) is missing or empty."""


class MalformedRequestError(SigningError, ValueError):
    """The request cannot be signed as given."""


class ConfigurationError(SigningError):
    """Signer configuration is incomplete."""
