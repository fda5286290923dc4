"""
The package-manager side of the extension installer.

The main object is `ExtensionInstaller`, which is called by the package
manager for every package it installs, updates or removes. The package files
are handled by a generic `AbstractLibraryInstaller`; registering the
extension with the host application is deferred by queueing a task in a
`TaskQueue` that is drained by a `TaskRunner` once the run is over.
"""

import contextlib
import os
import shutil
import tempfile
from logging import getLogger

from joomla_extension_installer.application import (
    AbstractBootstrapper,
    AbstractLibraryInstaller,
    InstalledRepository,
)
from joomla_extension_installer.classifier import (
    InstallationStateClassifier,
)
from joomla_extension_installer.config import get_configuration, get_temp_dir
from joomla_extension_installer.errors import PackageNotInstalledError
from joomla_extension_installer.manifest import ManifestLocator
from joomla_extension_installer.task_queue import PackageRef, TaskQueue
from joomla_extension_installer.utils import (
    is_forcing_update,
    parse_version,
    platform_name,
    supports,
)

log = getLogger(__name__)


class ExtensionInstaller:
    """Package-manager hooks queueing extension tasks for the host.

    Parameters
    ----------
    library_installer : AbstractLibraryInstaller
        Places the package files on disk.
    queue : TaskQueue
        Queue receiving the deferred tasks of this run.
    bootstrapper : AbstractBootstrapper
        Gives access to the host application.
    locator : ManifestLocator, optional
        Shared with the `TaskRunner` draining `queue`, so that preserved
        manifests of removed packages can be found again.
    classifier : InstallationStateClassifier, optional
        Defaults to a classifier built from the other collaborators.
    temp_dir : str, optional
        Directory for preserved manifests. If None, the ``temp_dir`` setting
        of the configuration file is used.
    project_root : str, optional
        Root of the site, used to name the host platform in messages.
    """

    def __init__(
        self,
        library_installer: AbstractLibraryInstaller,
        queue: TaskQueue,
        bootstrapper: AbstractBootstrapper,
        *,
        locator: ManifestLocator | None = None,
        classifier: InstallationStateClassifier | None = None,
        temp_dir: str | None = None,
        project_root: str | None = None,
    ) -> None:
        self.library_installer = library_installer
        self.queue = queue
        self.locator = locator or ManifestLocator()
        self.classifier = classifier or InstallationStateClassifier(
            bootstrapper, self.locator, library_installer
        )
        if temp_dir is None:
            temp_dir = get_temp_dir(get_configuration())
        self._temp_dir = temp_dir
        self._project_root = project_root

    # -------------------------- Public API ------------------------------
    @staticmethod
    def supports(package_type: str) -> bool:
        return supports(package_type)

    def get_install_path(self, package: PackageRef) -> str:
        return str(self.library_installer.get_install_path(package))

    def is_installed(
        self, repo: InstalledRepository, package: PackageRef
    ) -> bool:
        """Check if `package` is registered in the host application."""
        return self.classifier.classify(
            repo, package, self.get_install_path(package)
        )

    def install(self, repo: InstalledRepository, package: PackageRef) -> None:
        """Install the files of `package` and queue its registration.

        Packages the host application already knows about, or that ask for
        it, are queued for upgrading instead.
        """
        self.library_installer.install(repo, package)

        install_path = self.get_install_path(package)
        platform = platform_name(self._project_root)

        # check if this package was installed into the site before
        if self.is_installed(repo, package) or is_forcing_update(package):
            log.info(
                'Queuing %s for upgrading in %s', package.name, platform
            )
            self.queue.update(package, install_path)
        else:
            log.info(
                'Queuing %s for installation in %s', package.name, platform
            )
            self.queue.install(package, install_path)

    def update(
        self,
        repo: InstalledRepository,
        initial: PackageRef,
        target: PackageRef,
    ) -> None:
        """Update the files of `initial` to `target` and queue the upgrade."""
        self.library_installer.update(repo, initial, target)

        platform = platform_name(self._project_root)
        log.info('Queuing %s for upgrading in %s', target.name, platform)
        self._log_version_change(initial, target)

        self.queue.update(target, self.get_install_path(target))

    def uninstall(
        self, repo: InstalledRepository, package: PackageRef
    ) -> None:
        """Queue the removal of `package` and remove its files.

        The files are removed before the host application gets to
        deregister the extension, so the manifest is copied aside first.
        If that fails nothing is queued or removed.

        Raises
        ------
        PackageNotInstalledError
            If `repo` does not contain `package`.
        """
        if not repo.has_package(package):
            raise PackageNotInstalledError(package.name)

        install_path = self.get_install_path(package)
        manifest = self.locator.get_package_manifest(install_path)

        tmp_file = self._preserve_manifest(package, manifest)
        if tmp_file is None:
            return

        self.locator.set_package_manifest(install_path, tmp_file)

        platform = platform_name(self._project_root)
        log.info('Queuing %s for removal from %s', package.name, platform)
        self.queue.uninstall(package, install_path)

        self.library_installer.uninstall(repo, package)

    # -------------------------- Private methods ------------------------------
    def _preserve_manifest(
        self, package: PackageRef, manifest: str | None
    ) -> str | None:
        if manifest is None:
            log.error(
                'No manifest found in %s. Skipping uninstall of %s.',
                self.get_install_path(package),
                package.name,
            )
            return None

        prefix = package.name.replace('/', '-').replace(os.sep, '-')
        tmp_file = None
        try:
            fd, tmp_file = tempfile.mkstemp(prefix=prefix, dir=self._temp_dir)
            os.close(fd)
            shutil.copyfile(manifest, tmp_file)
        except OSError as exc:
            log.error(
                'Could not copy manifest %s to %s. Skipping uninstall of %s: '
                '%s',
                manifest,
                tmp_file,
                package.name,
                exc,
            )
            if tmp_file is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_file)
            return None
        return tmp_file

    @staticmethod
    def _log_version_change(initial: PackageRef, target: PackageRef) -> None:
        old = parse_version(initial.version)
        new = parse_version(target.version)
        if old is not None and new is not None and new < old:
            log.info(
                'Downgrading %s from %s to %s',
                target.name,
                initial.version,
                target.version,
            )
        elif initial.version != target.version:
            log.info(
                'Upgrading %s from %s to %s',
                target.name,
                initial.version or '?',
                target.version or '?',
            )
