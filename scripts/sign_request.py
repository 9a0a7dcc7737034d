#!/usr/bin/env python3
"""Sign one JSON request with credentials from the environment and send it."""
import argparse
import json
import logging
import sys

import requests

from awssign import ConfigurationError, SigningError
from awssign.auth import SigV4Auth
from awssign.config import SignerConfig

DEFAULT_BODY = {"sampleKey": "sampleValue"}


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('url', nargs='?', help="Endpoint URL (defaults to $AWSSIGN_ENDPOINT)")
    parser.add_argument('--method', default='POST')
    parser.add_argument('--body', default=json.dumps(DEFAULT_BODY), help="JSON request body")
    parser.add_argument('--dry-run', action='store_true', help="Print the signed headers without sending")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log the canonical request and string to sign")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = SignerConfig.from_env()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    url = args.url or config.endpoint
    if not url:
        print("Error: no URL given and AWSSIGN_ENDPOINT is unset", file=sys.stderr)
        return 1

    auth = SigV4Auth(config.signer(), config.service, config.region)
    request = requests.Request(
        args.method,
        url,
        data=args.body.encode('utf-8'),
        headers={'Content-Type': 'application/json; charset=utf-8'},
    )
    try:
        prepared = auth(request.prepare())
    except SigningError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for name, value in prepared.headers.items():
        print(f"{name}: {value}")
    if args.dry_run:
        return 0

    with requests.Session() as session:
        response = session.send(prepared)
    print(f"StatusCode: {response.status_code}")
    print(f"Response: {response.text}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
