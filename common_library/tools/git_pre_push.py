"""
Tag the current commit with the package version before pushing.

Reads ``[project].version`` from ``pyproject.toml``; when ``git tag`` has no
tag with exactly that name, creates it on the current commit and pushes it
to the remote. Meant to be called from a git pre-push hook:

    #!/bin/sh
    git-pre-push
"""

import sys
import argparse
import subprocess
import tomllib
from pathlib import Path
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


def get_version_from_pyproject(pyproject_path: Path = Path("pyproject.toml")) -> Optional[str]:
    """
    Read the package version from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Version string, or None if the file has no ``[project].version``
    """
    with open(pyproject_path, 'rb') as f:
        data = tomllib.load(f)

    version = data.get('project', {}).get('version')
    if isinstance(version, str):
        return version
    return None


def _git(*args: str) -> str:
    result = subprocess.run(
        ['git', *args],
        capture_output=True,
        text=True,
        check=True
    )
    return result.stdout


def list_tags() -> List[str]:
    """Return all tag names in the repository."""
    return [line.strip() for line in _git('tag').splitlines() if line.strip()]


def ensure_version_tag(version: str, remote: str = 'origin') -> bool:
    """
    Create and push a tag for ``version`` unless it already exists.

    Args:
        version: Tag name to create
        remote: Remote to push the tag to

    Returns:
        True if a tag was created, False if it already existed
    """
    if version in list_tags():
        logger.debug(f"Tag already exists: {version}")
        return False

    _git('tag', version)
    _git('push', remote, version)
    logger.info(f"Added tag: {version}")
    return True


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Tag the current commit with the pyproject.toml version and push the tag'
    )
    parser.add_argument(
        '--pyproject',
        type=Path,
        default=Path('pyproject.toml'),
        help='Path to pyproject.toml (default: pyproject.toml)'
    )
    parser.add_argument(
        '--remote',
        default='origin',
        help='Remote to push the tag to (default: origin)'
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    try:
        version = get_version_from_pyproject(args.pyproject)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.error(f"Failed to read {args.pyproject}: {e}")
        return 1

    if not version:
        logger.error(f"No [project].version in {args.pyproject}")
        return 1

    try:
        ensure_version_tag(version, remote=args.remote)
    except (OSError, subprocess.CalledProcessError) as e:
        stderr = getattr(e, 'stderr', None)
        logger.error(f"git command failed: {stderr.strip() if stderr else e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
