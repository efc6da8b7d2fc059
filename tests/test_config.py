"""
Tests for configuration loading.
"""

import pytest

from eolia.config import AppConfig, SupabaseConfig


def write_config(tmp_path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:

    def test_defaults(self):
        config = AppConfig()

        assert config.timezone == "Europe/Paris"
        assert config.supabase is None
        assert [m.label for m in config.get_motifs()] == [
            "Première consultation",
            "Suivi",
            "Consultation courte",
        ]

    def test_load_from_yaml(self, tmp_path):
        path = write_config(tmp_path, """
timezone: Europe/Brussels
booking_horizon_days: 14
supabase:
  url: https://demo.supabase.co/
  api_key: secret
motifs:
  - label: Séance
    duration_minutes: 50
""")

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "Europe/Brussels"
        assert config.booking_horizon_days == 14
        assert config.supabase.url == "https://demo.supabase.co"
        assert config.supabase.timeout_seconds == 30
        assert config.get_motifs()[0].duration_minutes == 50

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_empty_file_uses_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(write_config(tmp_path, ""))

        assert config.timezone == "Europe/Paris"

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(write_config(tmp_path, "motifs: [unclosed"))

    def test_root_must_be_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(write_config(tmp_path, "- a\n- b\n"))

    def test_duplicate_motif_labels(self):
        with pytest.raises(ValueError, match="Duplicate motif"):
            AppConfig(motifs=[
                {"label": "Suivi", "duration_minutes": 45},
                {"label": "suivi", "duration_minutes": 30},
            ])

    def test_motif_duration_must_be_positive(self):
        with pytest.raises(ValueError, match="greater than zero"):
            AppConfig(motifs=[{"label": "Suivi", "duration_minutes": 0}])

    def test_no_motifs(self):
        with pytest.raises(ValueError, match="At least one motif"):
            AppConfig(motifs=[])

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_horizon_range(self):
        with pytest.raises(ValueError):
            AppConfig(booking_horizon_days=0)


class TestSupabaseConfig:

    def test_url_must_be_absolute(self):
        with pytest.raises(ValueError, match="http"):
            SupabaseConfig(url="demo.supabase.co", api_key="secret")

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="timeout_seconds"):
            SupabaseConfig(url="https://demo.supabase.co", api_key="secret", timeout_seconds=0)
