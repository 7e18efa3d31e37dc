"""Tests for configuration."""

import argparse
from pathlib import Path

from srt_multilang.config import TranslatorConfig, DEFAULT_BATCH_SIZE


class TestTranslatorConfig:

    def test_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-env")
        assert TranslatorConfig().api_key == "sk-env"

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-env")
        assert TranslatorConfig(api_key="sk-arg").api_key == "sk-arg"

    def test_defaults_valid(self):
        config = TranslatorConfig(api_key="x")
        assert config.batch_size == DEFAULT_BATCH_SIZE
        assert config.max_concurrency is None
        assert config.max_retries == 1
        assert config.validate() is None

    def test_large_batch_size_allowed(self):
        assert TranslatorConfig(batch_size=10_000).validate() is None

    def test_invalid_values(self):
        assert "Batch size" in TranslatorConfig(batch_size=0).validate()
        assert "concurrency" in TranslatorConfig(max_concurrency=0).validate()
        assert "retries" in TranslatorConfig(max_retries=0).validate()

    def test_from_args(self, monkeypatch):
        monkeypatch.delenv("DEEPSEEK_API_KEY", raising=False)
        args = argparse.Namespace(
            api_key=None,
            base_url="http://localhost:1234/v1",
            model_name="local",
            max_retries=3,
            batch_size=20,
            max_concurrency=4,
            original_language="English",
            output_dir="out",
        )

        config = TranslatorConfig.from_args(args)

        assert config.api_key is None
        assert config.base_url == "http://localhost:1234/v1"
        assert config.model_name == "local"
        assert config.batch_size == 20
        assert config.max_concurrency == 4
        assert config.original_language == "English"
        assert config.output_dir == Path("out")
