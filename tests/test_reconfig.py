"""Tests for config-file based reconfiguration timestamps."""

import os

from bird.reconfig import last_reconfig_from_file_content, last_reconfig_from_file_stat


class TestFileStat:
    def test_mtime_as_iso_utc(self, tmp_path):
        config = tmp_path / "bird.conf"
        config.write_text("router id 192.0.2.1;\n")
        os.utime(config, (1704067200, 1704067200))

        assert last_reconfig_from_file_stat(str(config)) == "2024-01-01T00:00:00+00:00"

    def test_missing_file(self, tmp_path):
        assert last_reconfig_from_file_stat(str(tmp_path / "missing.conf")) == ""


class TestFileContent:
    def test_group_match(self, tmp_path):
        config = tmp_path / "bird.conf"
        config.write_text("# generated\n# Created: 2024-03-04 05:06:07 \nprotocol device {}\n")
        assert last_reconfig_from_file_content(str(config), r"# Created: (.*)") == "2024-03-04 05:06:07"

    def test_whole_match_without_group(self, tmp_path):
        config = tmp_path / "bird.conf"
        config.write_text("# build 2024-03-04\n")
        assert last_reconfig_from_file_content(str(config), r"\d{4}-\d{2}-\d{2}") == "2024-03-04"

    def test_no_match(self, tmp_path):
        config = tmp_path / "bird.conf"
        config.write_text("protocol device {}\n")
        assert last_reconfig_from_file_content(str(config), r"# Created: (.*)") == ""

    def test_invalid_pattern(self, tmp_path):
        config = tmp_path / "bird.conf"
        config.write_text("# Created: now\n")
        assert last_reconfig_from_file_content(str(config), r"# Created: (") == ""

    def test_missing_file(self, tmp_path):
        assert last_reconfig_from_file_content(str(tmp_path / "nope"), r"(.*)") == ""
