import pytest

from allotment_scraper.config import CrawlSettings, load_settings

ENV_VARS = [
    "ALLOTMENT_TARGET_URL",
    "ALLOTMENT_OUTPUT_DIR",
    "ALLOTMENT_HEADLESS",
    "ALLOTMENT_USER_AGENT",
    "ALLOTMENT_NAVIGATION_TIMEOUT_MS",
    "ALLOTMENT_ELEMENT_TIMEOUT_MS",
    "ALLOTMENT_RESULTS_TIMEOUT_MS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("allotment_scraper.config.load_dotenv", lambda *a, **k: False)


def test_defaults_match_the_allotment_site():
    settings = load_settings()

    assert settings == CrawlSettings()
    assert settings.target_url == "https://tgeapcet.nic.in/default.aspx"
    assert settings.output_dir == "2025 phase 2 data"
    assert settings.headless is True
    assert settings.selectors.top_placeholder == ""
    assert settings.selectors.second_placeholder == "0"
    assert settings.navigation_timeout_ms == 60000


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("ALLOTMENT_OUTPUT_DIR", "phase3")
    monkeypatch.setenv("ALLOTMENT_HEADLESS", "no")
    monkeypatch.setenv("ALLOTMENT_NAVIGATION_TIMEOUT_MS", "90000")

    settings = load_settings()

    assert settings.output_dir == "phase3"
    assert settings.headless is False
    assert settings.navigation_timeout_ms == 90000


def test_explicit_overrides_win_and_none_is_ignored(monkeypatch):
    monkeypatch.setenv("ALLOTMENT_OUTPUT_DIR", "phase3")

    settings = load_settings(output_dir="final", headless=None)

    assert settings.output_dir == "final"
    assert settings.headless is True


@pytest.mark.parametrize(
    "name, value",
    [("ALLOTMENT_HEADLESS", "maybe"), ("ALLOTMENT_ELEMENT_TIMEOUT_MS", "soon")],
)
def test_invalid_environment_value_names_variable(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=name):
        load_settings()
