import textwrap
from pathlib import Path

import pytest

from joomla_extension_installer import config
from joomla_extension_installer.application import (
    AbstractApplication,
    AbstractBootstrapper,
    AbstractLibraryInstaller,
    ExtensionRecord,
    InstalledRepository,
)
from joomla_extension_installer.task_queue import PackageRef

COMPONENT_MANIFEST = """\
<?xml version="1.0" encoding="utf-8"?>
<extension type="component" version="3.0" method="upgrade">
    <name>Docman</name>
    <version>3.1.0</version>
</extension>
"""


@pytest.fixture(autouse=True)
def _isolate_configuration(monkeypatch, tmp_path):
    config_path = tmp_path / '.joomla-extension-installer'
    monkeypatch.setattr(config, 'DEFAULT_CONFIG_PATH', config_path)
    monkeypatch.setattr(
        config,
        'DEFAULT_CONFIG_FILE_PATH',
        config_path / 'joomla-extension-installer.ini',
    )


class FakeApplication(AbstractApplication):
    def __init__(self, extensions=None, fail=()):
        self.extensions = dict(extensions or {})
        self.fail = set(fail)
        self.calls = []

    def get_extension(self, name, type):
        self.calls.append(('get_extension', name, type))
        return self.extensions.get((name, type))

    def install(self, install_path):
        self.calls.append(('install', install_path))
        return install_path not in self.fail

    def update(self, install_path):
        self.calls.append(('update', install_path))
        return install_path not in self.fail

    def uninstall(self, extension_id, type):
        self.calls.append(('uninstall', extension_id, type))
        return extension_id not in self.fail


class FakeBootstrapper(AbstractBootstrapper):
    def __init__(self, application=None):
        self.application = application
        self.calls = 0

    def get_application(self):
        self.calls += 1
        return self.application


class FakeLibraryInstaller(AbstractLibraryInstaller):
    def __init__(self, vendor_dir: Path):
        self.vendor_dir = vendor_dir
        self.calls = []

    def get_install_path(self, package):
        return str(self.vendor_dir / package.name)

    def install(self, repo, package):
        self.calls.append(('install', package.name))
        Path(self.get_install_path(package)).mkdir(
            parents=True, exist_ok=True
        )
        repo.add_package(package)

    def update(self, repo, initial, target):
        self.calls.append(('update', target.name))
        repo.remove_package(initial)
        repo.add_package(target)

    def uninstall(self, repo, package):
        self.calls.append(('uninstall', package.name))
        install_path = Path(self.get_install_path(package))
        for child in install_path.iterdir():
            child.unlink()
        install_path.rmdir()
        repo.remove_package(package)


def write_manifest(directory: Path, content: str, name='manifest.xml'):
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(textwrap.dedent(content))
    return path


@pytest.fixture
def application():
    return FakeApplication()


@pytest.fixture
def bootstrapper(application):
    return FakeBootstrapper(application)


@pytest.fixture
def library_installer(tmp_path):
    return FakeLibraryInstaller(tmp_path / 'vendor')


@pytest.fixture
def repo():
    return InstalledRepository()


@pytest.fixture
def package():
    return PackageRef(
        'joomlatools/docman', type='joomlatools-extension', version='3.1.0'
    )


@pytest.fixture
def component_path(library_installer, package):
    install_path = Path(library_installer.get_install_path(package))
    write_manifest(install_path, COMPONENT_MANIFEST, name='docman.xml')
    return install_path


@pytest.fixture
def registered(application):
    def _register(name, type, id):
        application.extensions[(name, type)] = ExtensionRecord(id, name, type)

    return _register


@pytest.fixture
def make_manifest():
    return write_manifest


@pytest.fixture
def unavailable_bootstrapper():
    return FakeBootstrapper(None)
