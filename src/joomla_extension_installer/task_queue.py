"""Deferred task queue for the extension installer.

The main object is `TaskQueue`, an ordered FIFO queue of pending
operations. The queued jobs are represented by a `deque` of frozen `*Task`
dataclasses that carry the package reference and the install path that was
resolved when the task was queued.

Available actions for each task are `install`, `update` and `uninstall`.
Tasks are only ever appended or drained as a whole; nothing in this module
touches the host application.
"""

from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum, auto
from logging import getLogger
from types import MappingProxyType
from typing import Any, ClassVar

log = getLogger(__name__)


class TaskActions(StrEnum):
    "Actions that can be deferred until the end of a package-manager run"

    INSTALL = auto()
    UPDATE = auto()
    UNINSTALL = auto()


@dataclass(frozen=True)
class PackageRef:
    """Immutable identity of a package handled by the package manager."""

    name: str
    type: str = ''
    version: str = ''
    extra: Mapping[str, Any] = field(
        default_factory=dict, compare=False, hash=False
    )

    def __post_init__(self) -> None:
        # extra metadata is exposed read-only
        object.__setattr__(self, 'extra', MappingProxyType(dict(self.extra)))

    def __str__(self) -> str:
        if self.version:
            return f'{self.name} {self.version}'
        return self.name


@dataclass(frozen=True)
class Task:
    """Base class for deferred tasks."""

    action: ClassVar[TaskActions]

    package: PackageRef
    install_path: str

    def __str__(self) -> str:
        return f'{self.action} {self.package.name} ({self.install_path})'


@dataclass(frozen=True)
class InstallTask(Task):
    action: ClassVar[TaskActions] = TaskActions.INSTALL


@dataclass(frozen=True)
class UpdateTask(Task):
    action: ClassVar[TaskActions] = TaskActions.UPDATE


@dataclass(frozen=True)
class UninstallTask(Task):
    action: ClassVar[TaskActions] = TaskActions.UNINSTALL


class TaskQueue:
    """Queue for install, update and uninstall tasks of a single run."""

    def __init__(self) -> None:
        self._queue: deque[Task] = deque()

    # -------------------------- Public API ------------------------------
    def install(self, package: PackageRef, install_path: str) -> Task:
        """Queue the installation of `package` from `install_path`.

        Parameters
        ----------
        package : PackageRef
            Package to install.
        install_path : str
            Directory the package files were placed in.

        Returns
        -------
        Task
            The queued task.
        """
        return self.enqueue(InstallTask(package, str(install_path)))

    def update(self, package: PackageRef, install_path: str) -> Task:
        """Queue the upgrade of `package` from `install_path`.

        Parameters
        ----------
        package : PackageRef
            Package to upgrade, at its target version.
        install_path : str
            Directory the package files were placed in.

        Returns
        -------
        Task
            The queued task.
        """
        return self.enqueue(UpdateTask(package, str(install_path)))

    def uninstall(self, package: PackageRef, install_path: str) -> Task:
        """Queue the removal of `package` installed at `install_path`.

        Parameters
        ----------
        package : PackageRef
            Package to remove.
        install_path : str
            Directory the package files were placed in.

        Returns
        -------
        Task
            The queued task.
        """
        return self.enqueue(UninstallTask(package, str(install_path)))

    def enqueue(self, task: Task) -> Task:
        """Append `task` to the end of the queue."""
        self._queue.append(task)
        log.debug('Queued task: %s', task)
        return task

    def dequeue_all(self) -> tuple[Task, ...]:
        """Remove and return every pending task, oldest first."""
        tasks = []
        while self._queue:
            tasks.append(self._queue.popleft())
        return tuple(tasks)

    def has_tasks(self) -> bool:
        """True if there are tasks remaining in the queue."""
        return bool(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._queue))
