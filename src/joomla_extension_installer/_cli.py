"""
A command line interface to inspect extension packages on disk.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from joomla_extension_installer.classifier import INSTALLED_MARKER
from joomla_extension_installer.config import get_configuration
from joomla_extension_installer.errors import ManifestParseError
from joomla_extension_installer.manifest import ManifestLocator, read_manifest

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)


def cli() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='joomla-extension-installer')
    p.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Configuration file to use instead of the default one.',
    )
    p.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Increase amount of output',
    )
    commands = p.add_subparsers(dest='command', required=True)
    inspect = commands.add_parser(
        'inspect',
        help='Show the manifest information of installed packages.',
    )
    inspect.add_argument(
        'paths',
        nargs='+',
        type=Path,
        help='Install paths of the packages',
    )
    return p


def inspect_path(locator: ManifestLocator, install_path: Path) -> dict:
    """Describe the package installed at `install_path`."""
    info = {
        'install_path': str(install_path),
        'installed_marker': (install_path / INSTALLED_MARKER).exists(),
        'manifest': locator.get_package_manifest(str(install_path)),
    }
    if info['manifest'] is None:
        info['error'] = 'no manifest found'
        return info

    try:
        manifest = read_manifest(info['manifest'])
    except ManifestParseError as exc:
        info['error'] = exc.reason
        return info

    info.update(
        type=manifest.type,
        name=manifest.name,
        element=manifest.element,
        version=manifest.version,
    )
    return info


def main(argv: Iterable[str] | None = None) -> int:
    args = cli().parse_args(argv)
    config = get_configuration(args.config)
    verbose = args.verbose or config.getboolean(
        'general', 'verbose', fallback=False
    )
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)

    locator = ManifestLocator()
    results = []
    for path in args.paths:
        log.info('Inspecting %s', path.resolve())
        results.append(inspect_path(locator, path))

    json.dump(results, sys.stdout, indent=2)
    sys.stdout.write('\n')

    return 1 if any('error' in info for info in results) else 0


if __name__ == '__main__':
    sys.exit(main())
