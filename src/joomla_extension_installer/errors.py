"""Exceptions raised by the extension installer."""


class InstallerError(Exception):
    """Base class for extension installer errors."""


class ManifestParseError(InstallerError):
    """A manifest file could not be read or is not a usable XML document."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f'Could not parse manifest {path}: {reason}')
        self.path = path
        self.reason = reason


class PackageNotInstalledError(InstallerError, ValueError):
    """An operation required a package the installed repository lacks."""

    def __init__(self, package_name: str) -> None:
        super().__init__(f'Package is not installed: {package_name}')
        self.package_name = package_name
