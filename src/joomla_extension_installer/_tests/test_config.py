import tempfile

from joomla_extension_installer import config


def test_config_file(tmp_path):
    assert not config.DEFAULT_CONFIG_PATH.exists()
    assert not config.DEFAULT_CONFIG_FILE_PATH.exists()

    initial_config = config.get_configuration()
    assert config.DEFAULT_CONFIG_PATH.exists()
    assert config.DEFAULT_CONFIG_FILE_PATH.exists()
    assert not initial_config.getboolean('general', 'verbose')
    assert config.get_temp_dir(initial_config) == tempfile.gettempdir()

    config.DEFAULT_CONFIG_FILE_PATH.write_text(
        f'[general]\nverbose = True\n\n[installer]\ntemp_dir = {tmp_path}\n'
    )
    second_config = config.get_configuration()
    assert second_config.getboolean('general', 'verbose')
    assert config.get_temp_dir(second_config) == str(tmp_path)


def test_config_file_path(tmp_path):
    config_file = tmp_path / 'custom' / 'installer.ini'
    config_file.parent.mkdir()
    config_file.write_text('[general]\nverbose = yes\n')

    custom_config = config.get_configuration(config_file)
    assert custom_config.getboolean('general', 'verbose')
    # missing sections fall back to the defaults
    assert custom_config.get('installer', 'temp_dir') == ''
