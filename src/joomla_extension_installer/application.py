"""Collaborators on both sides of the extension installer.

The package manager side is represented by `AbstractLibraryInstaller`, which
places package files on disk, and `InstalledRepository`, its bookkeeping of
installed packages. The host application side is represented by
`AbstractBootstrapper` and `AbstractApplication`, which own the extension
registry. Concrete integrations subclass the abstract classes.
"""

from dataclasses import dataclass

from joomla_extension_installer.task_queue import PackageRef


@dataclass(frozen=True)
class ExtensionRecord:
    """A row of the host application's extension registry."""

    id: int | None
    name: str = ''
    type: str = ''

    @property
    def is_installed(self) -> bool:
        return self.id is not None and self.id > 0


class AbstractApplication:
    """Abstract base class for a running host application."""

    # abstract method
    def get_extension(self, name: str, type: str) -> ExtensionRecord | None:
        "Look up the registry record of the extension `name` of `type`"
        raise NotImplementedError

    # abstract method
    def install(self, install_path: str) -> bool:
        "Register the extension found at `install_path`"
        raise NotImplementedError

    # abstract method
    def update(self, install_path: str) -> bool:
        "Upgrade the extension found at `install_path`"
        raise NotImplementedError

    # abstract method
    def uninstall(self, extension_id: int, type: str) -> bool:
        "Deregister the extension with registry id `extension_id`"
        raise NotImplementedError


class AbstractBootstrapper:
    """Abstract base class giving access to the host application."""

    # abstract method
    def get_application(self) -> AbstractApplication | None:
        """
        Return the host application, or None if it cannot be bootstrapped
        """
        raise NotImplementedError


class InstalledRepository:
    """The package manager's record of installed packages."""

    def __init__(self, packages=()) -> None:
        self._packages: dict[str, PackageRef] = {}
        for package in packages:
            self.add_package(package)

    def add_package(self, package: PackageRef) -> None:
        self._packages[package.name] = package

    def remove_package(self, package: PackageRef) -> None:
        self._packages.pop(package.name, None)

    def has_package(self, package: PackageRef) -> bool:
        return self._packages.get(package.name) == package

    def get_packages(self) -> list[PackageRef]:
        return list(self._packages.values())


class AbstractLibraryInstaller:
    """Abstract base class for the generic package file installer."""

    # abstract method
    def get_install_path(self, package: PackageRef) -> str:
        "Directory the files of `package` are placed in"
        raise NotImplementedError

    # abstract method
    def install(
        self, repo: InstalledRepository, package: PackageRef
    ) -> None:
        "Place the files of `package` and record it in `repo`"
        raise NotImplementedError

    # abstract method
    def update(
        self,
        repo: InstalledRepository,
        initial: PackageRef,
        target: PackageRef,
    ) -> None:
        "Replace the files of `initial` by those of `target`"
        raise NotImplementedError

    # abstract method
    def uninstall(
        self, repo: InstalledRepository, package: PackageRef
    ) -> None:
        "Remove the files of `package` and drop it from `repo`"
        raise NotImplementedError

    def is_installed(
        self, repo: InstalledRepository, package: PackageRef
    ) -> bool:
        """Check the package manager's own bookkeeping for `package`."""
        return repo.has_package(package)
