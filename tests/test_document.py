# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.10.19
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_document.py

import os
from unittest.mock import patch

import pytest
import yaml

from ghc.config.document import ConfigDocument, HostEntry
from ghc.system.exceptions import ConfigError


class TestLoad:
    def test_missing_file_is_empty(self, tmp_path):
        document = ConfigDocument.load(tmp_path / "config.yml")
        assert document == ConfigDocument()

    def test_blank_file_is_empty(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert ConfigDocument.load(path) == ConfigDocument()

    def test_sections(self, config_path, config_text):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(config_text)
        document = ConfigDocument.load(config_path)

        assert document.settings == {"git_protocol": "https", "editor": "vim"}
        assert document.aliases == {"co": "pr checkout"}
        host = document.hosts["github.com"]
        assert host.user == "monalisa"
        assert host.oauth_token == "gho_monalisa"
        assert host.settings == {"git_protocol": "ssh"}
        assert set(host.users) == {"monalisa", "hubot"}

    def test_scalars_become_strings(self):
        document = ConfigDocument.from_data({"prompt": True, "retries": 3})
        assert document.settings == {"prompt": "true", "retries": "3"}

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("hosts: [unclosed")
        with pytest.raises(ConfigError, match="failed to parse"):
            ConfigDocument.load(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_bytes(b"editor: \xff\xfe\n")
        with pytest.raises(ConfigError, match="failed to read"):
            ConfigDocument.load(path)

    @pytest.mark.parametrize("data", [
        ["not", "a", "mapping"],
        {"hosts": ["github.com"]},
        {"editor": {"nested": "value"}},
    ])
    def test_invalid_structure(self, data):
        with pytest.raises(ConfigError):
            ConfigDocument.from_data(data)


class TestSave:
    def test_output_layout(self, tmp_path):
        document = ConfigDocument(
            settings={"git_protocol": "ssh"},
            hosts={"github.com": HostEntry(user="monalisa", oauth_token="gho_x",
                                           settings={"git_protocol": "https"})},
        )
        path = tmp_path / "config.yml"
        document.save(path)

        data = yaml.safe_load(path.read_text())
        assert data == {
            "git_protocol": "ssh",
            "hosts": {"github.com": {"user": "monalisa", "oauth_token": "gho_x",
                                     "git_protocol": "https"}},
        }
        assert ConfigDocument.load(path) == document

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "config.yml"
        ConfigDocument(settings={"editor": "vim"}).save(path)
        assert (path.stat().st_mode & 0o777) == 0o600

    def test_failed_write_keeps_old_document(self, tmp_path):
        """A failure before the rename leaves the previous file and no temp files."""
        path = tmp_path / "config.yml"
        path.write_text("editor: nano\n")

        with patch("ghc.config.document.os.fsync", side_effect=OSError("disk full")):
            with pytest.raises(ConfigError, match="disk full"):
                ConfigDocument(settings={"editor": "vim"}).save(path)

        assert path.read_text() == "editor: nano\n"
        assert os.listdir(tmp_path) == ["config.yml"]
