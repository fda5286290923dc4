import json

import pytest

from joomla_extension_installer._cli import main


def test_inspect(tmp_path, make_manifest, capsys):
    docman = tmp_path / 'docman'
    make_manifest(
        docman,
        '<extension type="component"><name>Docman</name>'
        '<version>3.1.0</version></extension>',
        name='docman.xml',
    )
    (docman / 'joomla.installed').touch()

    assert main(['inspect', str(docman)]) == 0

    (info,) = json.loads(capsys.readouterr().out)
    assert info == {
        'install_path': str(docman),
        'installed_marker': True,
        'manifest': str(docman / 'docman.xml'),
        'type': 'component',
        'name': 'Docman',
        'element': 'com_docman',
        'version': '3.1.0',
    }


def test_inspect_errors(tmp_path, make_manifest, capsys):
    empty = tmp_path / 'empty'
    empty.mkdir()
    plugin = tmp_path / 'plugin'
    make_manifest(
        plugin,
        '<extension type="plugin" group="system"><name>Koowa</name>'
        '<files><filename plugin="koowa">koowa.php</filename></files>'
        '</extension>',
    )

    assert main(['inspect', str(empty), str(plugin)]) == 1

    first, second = json.loads(capsys.readouterr().out)
    assert first['error'] == 'no manifest found'
    assert first['manifest'] is None
    assert second['element'] == 'koowa'
    assert 'error' not in second


def test_missing_command(capsys):
    with pytest.raises(SystemExit):
        main([])
