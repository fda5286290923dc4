"""Locating and reading Joomla extension manifests.

A manifest is the XML file shipped with every extension describing its type
and name. The host application looks extensions up by the *element* name,
which is derived from the manifest differently for every extension type.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path

from joomla_extension_installer.errors import ManifestParseError

log = getLogger(__name__)

MANIFEST_ROOT_TAGS = ('extension', 'install')


@dataclass(frozen=True)
class Manifest:
    """The fields of a manifest the installer needs."""

    path: str
    type: str
    name: str
    element: str
    group: str = ''
    version: str = ''


def _text(root: ET.Element, tag: str) -> str:
    return (root.findtext(tag) or '').strip()


def _file_attribute(root: ET.Element, attribute: str) -> str:
    for filename in root.iterfind('files/filename'):
        if value := filename.get(attribute):
            return value.strip()
    return ''


def _element_name(root: ET.Element, type: str) -> str:
    """Derive the registry element name from a parsed manifest."""
    name = _text(root, 'name')
    lower_name = name.lower()

    if type == 'component':
        if not lower_name:
            return ''
        element = lower_name.replace(' ', '')
        if element.startswith('com_'):
            return element
        return f'com_{element}'
    if type == 'module':
        return _file_attribute(root, 'module') or lower_name
    if type == 'plugin':
        return _file_attribute(root, 'plugin') or lower_name
    if type == 'library':
        return _text(root, 'libraryname')
    if type == 'package':
        package_name = _text(root, 'packagename')
        if not package_name:
            return ''
        if package_name.startswith('pkg_'):
            return package_name
        return f'pkg_{package_name}'
    if type == 'file':
        if not lower_name:
            return ''
        element = lower_name.replace(' ', '_')
        if element.startswith('files_'):
            return element
        return f'files_{element}'
    if type == 'language':
        return _text(root, 'tag') or lower_name.replace(' ', '_')
    return lower_name.replace(' ', '_')


def _parse(path: str) -> ET.Element:
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ManifestParseError(path, str(exc)) from exc
    except OSError as exc:
        raise ManifestParseError(path, exc.strerror or str(exc)) from exc

    if not isinstance(root, ET.Element) or not isinstance(root.tag, str):
        raise ManifestParseError(path, 'document has no root element')
    return root


def read_manifest(path: str) -> Manifest:
    """Parse the manifest at `path`.

    Parameters
    ----------
    path : str
        Path to the manifest XML file.

    Returns
    -------
    Manifest
        Type, name and derived element name of the extension.

    Raises
    ------
    ManifestParseError
        If the file cannot be read or is not well-formed XML.
    """
    root = _parse(path)
    type = (root.get('type') or '').strip()
    return Manifest(
        path=str(path),
        type=type,
        name=_text(root, 'name'),
        element=_element_name(root, type),
        group=(root.get('group') or '').strip(),
        version=_text(root, 'version'),
    )


def is_manifest(path: Path) -> bool:
    """True if `path` is an XML file with an extension manifest root."""
    try:
        root = _parse(str(path))
    except ManifestParseError:
        return False
    return root.tag in MANIFEST_ROOT_TAGS


class ManifestLocator:
    """Find the manifest of the package installed at a given path.

    The manifest of a package can be redirected to another file with
    `set_package_manifest`. This is used to keep a copy of the manifest
    around after the package files themselves have been removed.
    """

    def __init__(self) -> None:
        self._overrides: dict[str, str] = {}

    @staticmethod
    def _key(install_path: str) -> str:
        return str(Path(install_path))

    def get_package_manifest(self, install_path: str) -> str | None:
        """Return the manifest path for `install_path`, or None."""
        override = self._overrides.get(self._key(install_path))
        if override is not None:
            return override

        directory = Path(install_path)
        if not directory.is_dir():
            return None

        for candidate in sorted(directory.glob('*.xml')):
            if candidate.is_file() and is_manifest(candidate):
                return str(candidate)

        log.debug('No manifest found in %s', install_path)
        return None

    def set_package_manifest(
        self, install_path: str, manifest_path: str
    ) -> None:
        """Use `manifest_path` as the manifest for `install_path`."""
        self._overrides[self._key(install_path)] = str(manifest_path)

    def reset_package_manifest(self, install_path: str) -> str | None:
        """Drop the manifest override of `install_path`, returning it."""
        return self._overrides.pop(self._key(install_path), None)

    def get_name_from_manifest(self, install_path: str) -> str:
        """Return the registry element name of the package at `install_path`.

        An empty string is returned if there is no usable manifest.
        """
        manifest = self.get_package_manifest(install_path)
        if manifest is None:
            return ''
        try:
            return read_manifest(manifest).element
        except ManifestParseError as exc:
            log.debug('%s', exc)
            return ''
