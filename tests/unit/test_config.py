"""
Unit tests for settings, run context and export target naming
"""

import pytest
from datetime import datetime, timezone, timedelta
from core.config import REQUIRED_SETTINGS, Settings
from core.exceptions import ConfigurationError, ErrorKind
from schemas.export import ExportTarget, RunContext, format_timestamp
from conftest import VALID_SETTINGS, make_settings


class TestSettings:
    """Test environment-backed settings"""

    def test_reads_case_sensitive_environment(self, monkeypatch):
        for name, value in VALID_SETTINGS.items():
            monkeypatch.setenv(name, value)
        monkeypatch.setenv("MAX_RETRIES", "5")

        settings = Settings(_env_file=None)

        assert settings.DatabaseName == "testdb"
        assert settings.BlobContainerName == "exports"
        assert settings.MAX_RETRIES == 5
        assert settings.missing_required() == []

    def test_defaults(self, settings):
        assert settings.MAX_RETRIES == 3
        assert settings.RETRY_DELAY_MS == 1000
        assert settings.MONGO_SERVER_SELECTION_TIMEOUT_MS == 5000
        assert settings.MONGO_CONNECT_TIMEOUT_MS == 10000
        assert settings.EXPORT_BLOB_PREFIX == "data-export"

    @pytest.mark.parametrize("name", REQUIRED_SETTINGS)
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_required_detects_absent_and_blank(self, name, value):
        settings = make_settings(**{name: value})

        assert settings.missing_required() == [name]


class TestRunContext:
    """Test run context resolution"""

    def test_from_settings(self, settings):
        context = RunContext.from_settings(settings)

        assert context.database_name == "testdb"
        assert context.collection_name == "items"
        assert context.container_name == "exports"
        assert context.max_retries == 3
        assert context.retry_delay_ms == 1000

    def test_from_settings_lists_every_missing_value(self):
        settings = make_settings(DatabaseName=None, BlobContainerName="")

        with pytest.raises(ConfigurationError) as exc_info:
            RunContext.from_settings(settings)

        assert exc_info.value.kind == ErrorKind.CONFIG_MISSING
        assert exc_info.value.context["missing"] == ["DatabaseName", "BlobContainerName"]

    def test_context_is_read_only(self, settings):
        context = RunContext.from_settings(settings)

        with pytest.raises(Exception):
            context.database_name = "other"


class TestExportTarget:
    """Test blob naming"""

    def test_blob_name_uses_millisecond_utc_timestamp(self):
        target = ExportTarget(
            container_name="exports",
            timestamp=datetime(2024, 1, 15, 10, 0, 0, 123456, tzinfo=timezone.utc)
        )

        assert target.blob_name == "data-export-2024-01-15T10:00:00.123Z.csv"

    def test_blob_name_converts_to_utc(self):
        offset = timezone(timedelta(hours=2))
        target = ExportTarget(
            container_name="exports",
            timestamp=datetime(2024, 1, 15, 12, 30, 0, tzinfo=offset)
        )

        assert target.blob_name == "data-export-2024-01-15T10:30:00.000Z.csv"

    def test_custom_prefix(self):
        target = ExportTarget(
            container_name="exports",
            timestamp=datetime(2024, 1, 15, tzinfo=timezone.utc),
            prefix="orders"
        )

        assert target.blob_name == "orders-2024-01-15T00:00:00.000Z.csv"

    def test_naive_timestamp_treated_as_utc(self):
        assert format_timestamp(datetime(2024, 1, 15, 10, 0, 0)) == "2024-01-15T10:00:00.000Z"
