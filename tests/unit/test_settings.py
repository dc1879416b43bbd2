import pytest
from pydantic import ValidationError

from score_intake.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert Settings().app_env == "dev"

    def test_default_db_port(self) -> None:
        assert Settings().db_port == 5432

    def test_default_max_job_attempts(self) -> None:
        assert Settings().max_job_attempts == 3

    def test_default_pdf_engine(self) -> None:
        assert Settings().pdf_engine == "pdfplumber"

    def test_default_analysis_thresholds(self) -> None:
        s = Settings()
        assert s.analysis_single_part_max_pages == 2
        assert s.analysis_pages_per_part_divisor == 4
        assert s.analysis_confidence_short == 90
        assert s.analysis_confidence_hint == 60
        assert s.analysis_confidence_inconclusive == 50
        assert s.analysis_confidence_heuristic == 30
        assert s.analysis_confidence_failure == 0


class TestSettingsFromEnv:
    def test_loads_session_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_STORE", "memory")
        assert Settings().session_store == "memory"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        assert Settings().db_host == "db.example.com"

    def test_loads_event_queue_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVENT_QUEUE_SIZE", "5")
        assert Settings().event_queue_size == 5

    def test_loads_confidence_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANALYSIS_CONFIDENCE_HEURISTIC", "25")
        assert Settings().analysis_confidence_heuristic == 25


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_queue_size_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVENT_QUEUE_SIZE", "lots")
        with pytest.raises(ValidationError):
            Settings()
