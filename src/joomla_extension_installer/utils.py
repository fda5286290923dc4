import json
from pathlib import Path

import packaging.version

from joomla_extension_installer.task_queue import PackageRef

#: Package types handled by the extension installer.
SUPPORTED_PACKAGE_TYPES = (
    'joomlatools-composer',
    'joomlatools-extension',
    'joomlatools-installer',
    'joomla-installer',
)

#: Package type of reusable components, which are never registered.
REUSABLE_COMPONENT_TYPE = 'joomlatools-composer'

#: Package extra key forcing an upgrade instead of a fresh installation.
FORCE_UPDATE_EXTRA = 'joomla-force-update'

#: Name of the Joomlatools Platform in its composer.json.
PLATFORM_PACKAGE_NAME = 'joomlatools/platform'


def supports(package_type: str) -> bool:
    """Return True if packages of `package_type` are handled here."""
    return package_type in SUPPORTED_PACKAGE_TYPES


def is_reusable_component(package: PackageRef) -> bool:
    """Determines if a package is a reusable component.

    Reusable components are plain libraries: if the package manager resolved
    them they are available, there is nothing to register.

    Returns
    -------
    bool
        ``True`` if a reusable component, ``False`` if not.
    """
    return package.type == REUSABLE_COMPONENT_TYPE


def is_forcing_update(package: PackageRef) -> bool:
    """Determines if a package asks to always be upgraded.

    Returns
    -------
    bool
        ``True`` if the ``joomla-force-update`` extra is set, ``False`` if
        not.
    """
    value = package.extra.get(FORCE_UPDATE_EXTRA, False)
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def is_joomlatools_platform(root: str | None = None) -> bool:
    """Determines if the project at `root` is a Joomlatools Platform site.

    The platform is recognized by the name in the project's
    ``composer.json``. `root` defaults to the current working directory.
    """
    composer_json = Path(root or Path.cwd()) / 'composer.json'
    try:
        data = json.loads(composer_json.read_text())
    except (OSError, ValueError):
        return False
    return isinstance(data, dict) and data.get('name') == PLATFORM_PACKAGE_NAME


def platform_name(root: str | None = None) -> str:
    """Human readable name of the host platform, for messages."""
    if is_joomlatools_platform(root):
        return 'Joomlatools Platform'
    return 'Joomla'


def parse_version(v: str) -> packaging.version.Version | None:
    """Parse a version string and return a packaging.version.Version obj.

    Package-manager versions that are not PEP 440 compliant, such as branch
    aliases like ``dev-master``, return None.
    """
    try:
        return packaging.version.Version(v)
    except packaging.version.InvalidVersion:
        return None
