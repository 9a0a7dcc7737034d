"""Signer settings read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError
from .sigv4 import Service, SigV4Signer

DEFAULT_SERVICE = Service.EXECUTE_API.value


@dataclass(frozen=True)
class SignerConfig:
    access_key: str
    secret_key: str
    region: str
    service: str = DEFAULT_SERVICE
    endpoint: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'SignerConfig':
        """
        Read settings from ``environ`` (``os.environ`` by default).

        ``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY`` and ``AWS_REGION`` (or
        ``AWS_DEFAULT_REGION``) are required. ``AWSSIGN_SERVICE`` and
        ``AWSSIGN_ENDPOINT`` are optional.

        :raises ConfigurationError: listing every required variable that is unset
        """
        env = os.environ if environ is None else environ
        access_key = env.get('AWS_ACCESS_KEY_ID', '')
        secret_key = env.get('AWS_SECRET_ACCESS_KEY', '')
        region = env.get('AWS_REGION') or env.get('AWS_DEFAULT_REGION', '')

        missing = [
            name for name, value in (
                ('AWS_ACCESS_KEY_ID', access_key),
                ('AWS_SECRET_ACCESS_KEY', secret_key),
                ('AWS_REGION', region),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")

        return cls(
            access_key=access_key,
            secret_key=secret_key,
            region=region,
            service=env.get('AWSSIGN_SERVICE') or DEFAULT_SERVICE,
            endpoint=env.get('AWSSIGN_ENDPOINT') or None,
        )

    def signer(self) -> SigV4Signer:
        return SigV4Signer(self.access_key, self.secret_key)

    def __repr__(self) -> str:
        return (
            f"SignerConfig(access_key={self.access_key!r}, secret_key='***', region={self.region!r}, "
            f"service={self.service!r}, endpoint={self.endpoint!r})"
        )
