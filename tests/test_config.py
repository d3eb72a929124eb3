"""
Tests for WorkerConfig and SourceConfig.
"""

import pytest

from mercadoworker.config import PageFailurePolicy, SourceConfig, WorkerConfig
from mercadoworker.errors import ConfigurationError


class TestSourceConfig:
    """Test SourceConfig defaults and validation."""

    def test_default_values(self):
        """Test SourceConfig has correct defaults."""
        config = SourceConfig()

        assert config.api_host == "https://api.mercadolibre.com"
        assert config.page_size == 50
        assert config.busy_catalog_threshold == 50
        assert config.large_catalog_threshold == 300
        assert config.large_catalog_image_cap == 3
        assert config.page_failure_policy == PageFailurePolicy.SKIP
        assert config.request_timeout == 30.0

    def test_no_seller_defaults(self):
        """Ensure no hardcoded seller or site."""
        config = SourceConfig()

        assert config.username == ""
        assert config.site_id == ""
        assert config.missing_fields() == ["username", "site_id"]

    def test_missing_fields_when_complete(self):
        """Test no missing fields once seller and site are set."""
        config = SourceConfig(username="SELLER", site_id="MLA")
        assert config.missing_fields() == []

    def test_policy_from_string(self):
        """Test policy names are parsed case-insensitively."""
        config = SourceConfig(page_failure_policy="ABORT")
        assert config.page_failure_policy == PageFailurePolicy.ABORT

    def test_unknown_policy_rejected(self):
        """Test an unknown policy name is rejected."""
        with pytest.raises(ConfigurationError):
            SourceConfig(page_failure_policy="retry")

    @pytest.mark.parametrize("page_size", [0, -5])
    def test_non_positive_page_size_rejected(self, page_size):
        """Test page_size must be positive."""
        with pytest.raises(ConfigurationError):
            SourceConfig(page_size=page_size)

    @pytest.mark.parametrize(
        "field",
        ["busy_catalog_threshold", "large_catalog_threshold", "large_catalog_image_cap"],
    )
    def test_negative_limits_rejected(self, field):
        """Test catalog thresholds and the image cap must not be negative."""
        with pytest.raises(ConfigurationError):
            SourceConfig(**{field: -1})

    def test_zero_limits_allowed(self):
        """Test zero thresholds and cap are accepted."""
        config = SourceConfig(
            busy_catalog_threshold=0, large_catalog_threshold=0, large_catalog_image_cap=0
        )

        assert config.large_catalog_threshold == 0
        assert config.large_catalog_image_cap == 0

    def test_from_env_rejects_zero_page_size(self, monkeypatch):
        """Test a zero ML_PAGE_SIZE fails at load time."""
        monkeypatch.setenv("ML_PAGE_SIZE", "0")

        with pytest.raises(ConfigurationError):
            WorkerConfig.from_env()


class TestWorkerConfig:
    """Test WorkerConfig defaults and environment loading."""

    def test_default_values(self, monkeypatch):
        """Test WorkerConfig has correct defaults."""
        for key in ["SERVICE_NAME", "LOG_LEVEL", "CACHE_DIR", "SCHEDULE_INTERVAL"]:
            monkeypatch.delenv(key, raising=False)

        config = WorkerConfig()

        assert config.service_name == "mercadoworker"
        assert config.log_level == "INFO"
        assert config.schedule_interval == 0
        assert isinstance(config.source, SourceConfig)

    def test_from_env_loads_defaults(self, monkeypatch):
        """Test from_env() returns config with defaults."""
        for key in [
            "SERVICE_NAME",
            "ML_USERNAME",
            "ML_SITE_ID",
            "ML_PAGE_FAILURE_POLICY",
            "ML_REQUEST_TIMEOUT",
            "SCHEDULE_INTERVAL_SEC",
        ]:
            monkeypatch.delenv(key, raising=False)

        config = WorkerConfig.from_env()

        assert config.service_name == "mercadoworker"
        assert config.source.username == ""
        assert config.source.page_failure_policy == PageFailurePolicy.SKIP
        assert config.schedule_interval == 0

    def test_from_env_loads_custom_values(self, monkeypatch):
        """Test from_env() loads from environment."""
        monkeypatch.setenv("ML_USERNAME", "TIENDA")
        monkeypatch.setenv("ML_SITE_ID", "MLB")
        monkeypatch.setenv("ML_IMAGE_CAP", "5")
        monkeypatch.setenv("ML_PAGE_FAILURE_POLICY", "abort")
        monkeypatch.setenv("ML_REQUEST_TIMEOUT", "")
        monkeypatch.setenv("SCHEDULE_INTERVAL_SEC", "3600")

        config = WorkerConfig.from_env()

        assert config.source.username == "TIENDA"
        assert config.source.site_id == "MLB"
        assert config.source.large_catalog_image_cap == 5
        assert config.source.page_failure_policy == PageFailurePolicy.ABORT
        assert config.source.request_timeout is None
        assert config.schedule_interval == 3600
