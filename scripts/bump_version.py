#!/usr/bin/env python3
import argparse
import os
import re
import sys
from pathlib import Path

PYPROJECT = Path('pyproject.toml')
PACKAGE_INIT = Path('awssign/__init__.py')

PYPROJECT_VERSION = re.compile(r'^version = "([^"]+)"', re.MULTILINE)
INIT_VERSION = re.compile(r'__version__ = "([^"]+)"')


def bump_version(current: str, bump_type: str) -> str:
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    elif bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    elif bump_type == 'patch':
        return f"{major}.{minor}.{patch + 1}"
    else:
        raise ValueError(f"Invalid bump type: {bump_type}")


def read_version(pyproject: Path) -> str:
    match = PYPROJECT_VERSION.search(pyproject.read_text())
    if not match:
        raise ValueError(f"Could not find version in {pyproject}")
    return match.group(1)


def write_version(pyproject: Path, package_init: Path, new_version: str) -> None:
    pyproject.write_text(PYPROJECT_VERSION.sub(f'version = "{new_version}"', pyproject.read_text(), count=1))
    package_init.write_text(INIT_VERSION.sub(f'__version__ = "{new_version}"', package_init.read_text()))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Bump the awssign version")
    parser.add_argument('bump_type', choices=['major', 'minor', 'patch'])
    args = parser.parse_args(argv)

    try:
        current_version = read_version(PYPROJECT)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    new_version = bump_version(current_version, args.bump_type)
    write_version(PYPROJECT, PACKAGE_INIT, new_version)

    # Output for GitHub Actions
    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
