# tests/core/test_config.py
"""
Tests for the Config class and the run-scoped EstimationSettings.
"""

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from podcapacity.core.config import DEFAULT_HEALTH_CONDITIONS, DEFAULT_MAX_CONCURRENCY, Config
from podcapacity.models.settings import EstimationSettings


class TestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("KUBECONFIG", raising=False)
        cfg = Config()

        assert cfg.KUBECONFIG == str(Path.home() / ".kube" / "config")
        assert cfg.WORKER_LABEL is None
        assert cfg.HEALTH_CONDITIONS == DEFAULT_HEALTH_CONDITIONS
        assert cfg.STRICT_POD_ERRORS is False
        assert cfg.MAX_CONCURRENCY == 4

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KUBECONFIG", "/tmp/a.yaml:/tmp/b.yaml")
        monkeypatch.setenv("PODCAPACITY_WORKER_LABEL", "node-role.kubernetes.io/node=true")
        monkeypatch.setenv("PODCAPACITY_HEALTH_CONDITIONS", "Ready, DiskPressure")
        monkeypatch.setenv("PODCAPACITY_STRICT_POD_ERRORS", "yes")
        monkeypatch.setenv("PODCAPACITY_MAX_CONCURRENCY", "8")
        cfg = Config()

        assert cfg.KUBECONFIG == "/tmp/a.yaml"
        assert cfg.WORKER_LABEL == "node-role.kubernetes.io/node=true"
        assert cfg.HEALTH_CONDITIONS == ["Ready", "DiskPressure"]
        assert cfg.STRICT_POD_ERRORS is True
        assert cfg.MAX_CONCURRENCY == 8

    @pytest.mark.parametrize("raw", ["0", "-2", "four", "1.5"])
    def test_invalid_concurrency_falls_back_to_default(self, monkeypatch, caplog, raw):
        monkeypatch.setenv("PODCAPACITY_MAX_CONCURRENCY", raw)
        cfg = Config()

        with caplog.at_level(logging.WARNING, logger="podcapacity.core.config"):
            assert cfg.MAX_CONCURRENCY == DEFAULT_MAX_CONCURRENCY
            cfg.validate_instance()
        assert any("PODCAPACITY_MAX_CONCURRENCY" in record.getMessage() for record in caplog.records)

    def test_validate_warns_on_bad_worker_label(self, monkeypatch, caplog):
        monkeypatch.setenv("PODCAPACITY_WORKER_LABEL", "=true")

        with caplog.at_level(logging.WARNING, logger="podcapacity.core.config"):
            Config().validate_instance()
        assert any("PODCAPACITY_WORKER_LABEL" in record.getMessage() for record in caplog.records)

        with pytest.raises(ValidationError):
            EstimationSettings.from_config(Config())


class TestEstimationSettings:
    def test_from_config_uses_environment(self, monkeypatch):
        monkeypatch.setenv("PODCAPACITY_STRICT_POD_ERRORS", "true")

        settings = EstimationSettings.from_config(Config())

        assert settings.strict_pod_errors is True
        assert settings.verbose is False

    def test_overrides_win_unless_none(self, monkeypatch):
        monkeypatch.setenv("PODCAPACITY_MAX_CONCURRENCY", "8")

        settings = EstimationSettings.from_config(Config(), max_concurrency=None, worker_label="tier=compute")

        assert settings.max_concurrency == 8
        assert settings.worker_label == "tier=compute"

    def test_worker_label_selector(self):
        assert EstimationSettings().worker_label_selector is None
        assert EstimationSettings(worker_label="tier").worker_label_selector == ("tier", None)
        assert EstimationSettings(worker_label="tier=compute").worker_label_selector == ("tier", "compute")
        assert EstimationSettings(worker_label="tier=").worker_label_selector == ("tier", "")
        assert EstimationSettings(worker_label="  ").worker_label is None

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            EstimationSettings(max_concurrency=0)
        with pytest.raises(ValidationError):
            EstimationSettings(worker_label="=x")

    def test_settings_are_immutable(self):
        settings = EstimationSettings()

        with pytest.raises(ValidationError):
            settings.verbose = True
