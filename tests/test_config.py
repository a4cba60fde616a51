"""Tests for configuration loading."""

import json

from core.config import Config, load_config


class TestLoadConfig:
    """Config file creation and recovery."""

    def test_creates_default(self, tmp_path):
        config_file = tmp_path / "local-relay" / "config.json"

        config = load_config(config_file)

        assert config == Config()
        assert json.loads(config_file.read_text())["proxy"]["port"] == 8080

    def test_reads_existing(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"proxy": {"port": 9999}, "upstream": {"timeout": None}}))

        config = load_config(config_file)

        assert config.proxy.port == 9999
        assert config.upstream.timeout is None
        assert config.cors.allow_origins == ["*"]

    def test_corrupted_file_is_backed_up(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{broken")

        config = load_config(config_file)

        assert config == Config()
        assert (tmp_path / "config.json.bak").read_text() == "{broken"

    def test_invalid_values_are_backed_up(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"proxy": {"port": "not a port"}}))

        assert load_config(config_file) == Config()
        assert (tmp_path / "config.json.bak").exists()

    def test_default_cors_policy(self):
        cors = Config().cors

        assert cors.allow_methods == ["OPTIONS", "GET", "POST", "DELETE", "PUT", "PATCH"]
        assert "Sec-Fetch-Mode" in cors.allow_headers

    def test_redirects_followed_by_default(self):
        upstream = Config().upstream

        assert upstream.follow_redirects is True
        assert upstream.max_redirects == 10
