"""
Tests for Settings defaults.
"""
from foundations.core.config import Settings


class TestSettingsDefaults:
    def test_default_database_url_names_psycopg2_driver(self):
        default = Settings.model_fields["DATABASE_URL"].default
        assert default.startswith("postgresql+psycopg2://")

    def test_cors_wildcard(self):
        assert Settings(CORS_ORIGINS="*").cors_origins_list == ["*"]

    def test_cors_list_is_split_and_trimmed(self):
        s = Settings(CORS_ORIGINS="https://a.example, https://b.example ,")
        assert s.cors_origins_list == ["https://a.example", "https://b.example"]
