"""Replay deferred tasks against the host application.

`TaskRunner` drains a `TaskQueue` once all package-manager operations of a
run have completed. The host application is bootstrapped a single time and
every task is performed in the order it was queued. A failing task is logged
and reported, and processing continues with the next one.
"""

import contextlib
import os
from logging import getLogger
from typing import TypedDict

from typing_extensions import NotRequired

from joomla_extension_installer.application import (
    AbstractApplication,
    AbstractBootstrapper,
)
from joomla_extension_installer.errors import InstallerError
from joomla_extension_installer.manifest import ManifestLocator, read_manifest
from joomla_extension_installer.task_queue import (
    Task,
    TaskActions,
    TaskQueue,
)

log = getLogger(__name__)


class TaskResult(TypedDict):
    """Data about a replayed task."""

    action: TaskActions
    package: str
    install_path: str
    success: bool
    error: NotRequired[str]


class TaskRunner:
    """Drain a task queue into the host application.

    Parameters
    ----------
    bootstrapper : AbstractBootstrapper
        Gives access to the host application.
    locator : ManifestLocator, optional
        Must be the locator used when queueing the tasks, so that manifests
        preserved for uninstall tasks are found.
    """

    def __init__(
        self,
        bootstrapper: AbstractBootstrapper,
        *,
        locator: ManifestLocator | None = None,
    ) -> None:
        self._bootstrapper = bootstrapper
        self.locator = locator or ManifestLocator()

    def run(self, queue: TaskQueue) -> tuple[TaskResult, ...]:
        """Perform and remove every task of `queue`, oldest first.

        Returns
        -------
        tuple[TaskResult, ...]
            One result per task, in the order the tasks were performed.
        """
        tasks = queue.dequeue_all()
        if not tasks:
            return ()

        application = self._bootstrapper.get_application()
        if application is None:
            msg = 'Can not instantiate application to process queued tasks'
            log.error('%s. Skipping %d task(s).', msg, len(tasks))
            for task in tasks:
                if task.action == TaskActions.UNINSTALL:
                    self._discard_preserved_manifest(task.install_path)
            return tuple(self._result(task, error=msg) for task in tasks)

        return tuple(self._run_task(application, task) for task in tasks)

    # -------------------------- Private methods ------------------------------
    def _run_task(
        self, application: AbstractApplication, task: Task
    ) -> TaskResult:
        handler = self._get_handler(task.action)
        log.info('Processing %s', task)
        try:
            error = handler(application, task)
        except (InstallerError, OSError) as exc:
            error = str(exc)
        except Exception as exc:
            log.exception('Unexpected error while processing %s', task)
            error = f'{type(exc).__name__}: {exc}'

        if error:
            log.error(
                'Could not %s %s: %s', task.action, task.package.name, error
            )
            return self._result(task, error=error)
        return self._result(task)

    def _get_handler(self, action: TaskActions):
        if action == TaskActions.INSTALL:
            return self._install
        if action == TaskActions.UPDATE:
            return self._update
        if action == TaskActions.UNINSTALL:
            return self._uninstall
        raise ValueError(f"Action '{action}' not supported!")

    def _install(
        self, application: AbstractApplication, task: Task
    ) -> str | None:
        if not application.install(task.install_path):
            return f'installation from {task.install_path} failed'
        return None

    def _update(
        self, application: AbstractApplication, task: Task
    ) -> str | None:
        if not application.update(task.install_path):
            return f'upgrade from {task.install_path} failed'
        return None

    def _uninstall(
        self, application: AbstractApplication, task: Task
    ) -> str | None:
        manifest_path = self.locator.get_package_manifest(task.install_path)
        if manifest_path is None:
            return f'no manifest found for {task.install_path}'

        try:
            manifest = read_manifest(manifest_path)
            if not manifest.element:
                return f'no extension name found in {manifest_path}'

            extension = application.get_extension(
                manifest.element, manifest.type
            )
            if extension is None or not extension.is_installed:
                return (
                    f'{manifest.type} {manifest.element} is not installed'
                )

            if not application.uninstall(extension.id, manifest.type):
                return f'removal of {manifest.type} {manifest.element} failed'
            return None
        finally:
            self._discard_preserved_manifest(task.install_path)

    def _discard_preserved_manifest(self, install_path: str) -> None:
        preserved = self.locator.reset_package_manifest(install_path)
        if preserved is not None:
            with contextlib.suppress(OSError):
                os.unlink(preserved)

    @staticmethod
    def _result(task: Task, error: str | None = None) -> TaskResult:
        result: TaskResult = {
            'action': task.action,
            'package': task.package.name,
            'install_path': task.install_path,
            'success': error is None,
        }
        if error is not None:
            result['error'] = error
        return result
