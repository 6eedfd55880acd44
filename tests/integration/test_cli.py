import os
from unittest.mock import patch

import pytest

from translation_extractor import cli
from translation_extractor.app_config import AppConfig
from translation_extractor.persistence import canonical_path


@pytest.fixture
def app_config(output_root):
    return AppConfig(
        project_root=os.path.dirname(output_root),
        output_root=output_root,
        snapshot_path=None,
        source_locale_id="en-US",
        target_locale_id="ja-JP",
        self_owner_id="CS2_Translate_Mod",
        merge_overlapping_groups=True,
        overlap_threshold=0.5,
        enable_translation=True
    )


@pytest.fixture
def snapshot_file(output_root, write_json, make_source):
    path = os.path.join(os.path.dirname(output_root), "snapshot.json")
    return write_json(path, {
        "sources": [make_source("en-US", {"Foo.Bar": "v1"}, package="FooMod")],
        "active": {"Foo.Bar": "v1"},
    })


def test_main_writes_files_from_snapshot(app_config, output_root, snapshot_file, capsys):
    with patch("translation_extractor.cli.load_app_config", return_value=app_config):
        exit_code = cli.main([output_root, "--snapshot", snapshot_file])

    assert exit_code == 0
    assert os.path.isfile(canonical_path(output_root, "Foo"))
    assert "Extraction complete: 1 mod(s), 1 entries, 1 file(s)." in capsys.readouterr().out


def test_main_uses_configured_snapshot(app_config, output_root, snapshot_file):
    app_config.snapshot_path = snapshot_file
    with patch("translation_extractor.cli.load_app_config", return_value=app_config):
        assert cli.main([output_root]) == 0


def test_main_without_snapshot_fails(app_config, output_root, capsys):
    with patch("translation_extractor.cli.load_app_config", return_value=app_config):
        exit_code = cli.main([output_root])

    assert exit_code == 1
    assert "No record-source snapshot configured" in capsys.readouterr().err


def test_main_with_unreadable_snapshot_fails(app_config, output_root, write_json, capsys):
    broken = write_json(os.path.join(os.path.dirname(output_root), "broken.json"), "{")
    with patch("translation_extractor.cli.load_app_config", return_value=app_config):
        exit_code = cli.main([output_root, "--snapshot", broken])

    assert exit_code == 1
    assert "Could not load snapshot" in capsys.readouterr().err


def test_run_extraction_with_explicit_provider(app_config, output_root, make_provider, make_source):
    provider = make_provider([make_source("fr-FR", {"Foo.Bar": "fr"}, package="FooMod")])

    result = cli.run_extraction(output_root, source_locale_id="fr-FR", provider=provider, config=app_config)

    assert result.success
    assert result.written_files == (canonical_path(output_root, "Foo"),)


def test_main_defaults_to_configured_output_root(app_config, output_root, snapshot_file):
    app_config.snapshot_path = snapshot_file
    with patch("translation_extractor.cli.load_app_config", return_value=app_config):
        assert cli.main([]) == 0

    assert os.path.isfile(canonical_path(output_root, "Foo"))
