"""Decide whether a package is already installed in the host application.

The package manager only knows about packages it installed itself. A site
may already contain an extension that was installed by hand, or by an
earlier installer, in which case the package has to be upgraded rather than
installed. `InstallationStateClassifier` answers that question by looking
the package's manifest up in the host application's extension registry.
"""

from logging import getLogger
from pathlib import Path

from joomla_extension_installer.application import (
    AbstractBootstrapper,
    AbstractLibraryInstaller,
    InstalledRepository,
)
from joomla_extension_installer.errors import ManifestParseError
from joomla_extension_installer.manifest import ManifestLocator, read_manifest
from joomla_extension_installer.task_queue import PackageRef
from joomla_extension_installer.utils import is_reusable_component

log = getLogger(__name__)

#: Marker file recording an installation done outside the package manager.
INSTALLED_MARKER = 'joomla.installed'


class InstallationStateClassifier:
    """Read-only query of the installation state of packages.

    Parameters
    ----------
    bootstrapper : AbstractBootstrapper
        Gives access to the host application, if it can be started.
    locator : ManifestLocator
        Finds the manifest of a package.
    library_installer : AbstractLibraryInstaller
        The package manager's installer, asked when a manifest is unusable.
    """

    def __init__(
        self,
        bootstrapper: AbstractBootstrapper,
        locator: ManifestLocator,
        library_installer: AbstractLibraryInstaller,
    ) -> None:
        self._bootstrapper = bootstrapper
        self._locator = locator
        self._library_installer = library_installer

    def classify(
        self,
        repo: InstalledRepository,
        package: PackageRef,
        install_path: str,
    ) -> bool:
        """Check if `package` is present in the host application.

        Returns
        -------
        bool
            ``True`` if the extension is registered, ``False`` if not or if
            that cannot be determined.
        """
        if is_reusable_component(package):
            # resolved by the package manager, nothing to register
            return True

        application = self._bootstrapper.get_application()
        if application is None:
            log.info(
                'Can not instantiate application to check if %s is '
                'installed',
                package.name,
            )
            return False

        try:
            if (Path(install_path) / INSTALLED_MARKER).exists():
                return True

            manifest_path = self._locator.get_package_manifest(install_path)
        except OSError as exc:
            log.info('Could not inspect %s: %s', install_path, exc)
            return False

        if manifest_path is None:
            return False

        try:
            manifest = read_manifest(manifest_path)
        except ManifestParseError as exc:
            log.info('%s', exc)
            return self._library_installer.is_installed(repo, package)

        if not manifest.element:
            return False

        extension = application.get_extension(manifest.element, manifest.type)
        if extension is None:
            return False

        return extension.id is not None and extension.id > 0
