import configparser
import tempfile
from pathlib import Path

DEFAULT_CONFIG_PATH = Path.home() / '.joomla-extension-installer'
DEFAULT_CONFIG_FILE_PATH = (
    DEFAULT_CONFIG_PATH / 'joomla-extension-installer.ini'
)

DEFAULTS = {
    'general': {'verbose': 'False'},
    'installer': {'temp_dir': ''},
}


def get_configuration(
    path: Path | None = None,
) -> configparser.ConfigParser:
    """
    Get extension installer configuration.

    The configuration file is created with default values on first use:
        * `['general']['verbose']` -> bool, log diagnostics
        * `['installer']['temp_dir']` -> str, directory for preserved
          manifests, empty for the system temporary directory
    """
    config_file = Path(path) if path is not None else DEFAULT_CONFIG_FILE_PATH
    config_file.parent.mkdir(parents=True, exist_ok=True)

    config = configparser.ConfigParser()
    config.read_dict(DEFAULTS)

    if config_file.exists():
        config.read(config_file)
    else:
        # Write the default configuration to a file
        with open(config_file, 'w') as configfile:
            config.write(configfile)

    return config


def get_temp_dir(config: configparser.ConfigParser) -> str:
    """Directory in which manifests of removed packages are preserved."""
    temp_dir = config.get('installer', 'temp_dir', fallback='').strip()
    return temp_dir or tempfile.gettempdir()
