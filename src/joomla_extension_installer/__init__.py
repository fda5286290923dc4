"""Deferred installation of Joomla extensions from package-manager runs."""

from joomla_extension_installer.classifier import (
    InstallationStateClassifier,
)
from joomla_extension_installer.package_installer import ExtensionInstaller
from joomla_extension_installer.runner import TaskRunner
from joomla_extension_installer.task_queue import (
    InstallTask,
    PackageRef,
    TaskActions,
    TaskQueue,
    UninstallTask,
    UpdateTask,
)

__version__ = '1.0.0'

__all__ = [
    'ExtensionInstaller',
    'InstallTask',
    'InstallationStateClassifier',
    'PackageRef',
    'TaskActions',
    'TaskQueue',
    'TaskRunner',
    'UninstallTask',
    'UpdateTask',
]
