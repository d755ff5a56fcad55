from unittest.mock import AsyncMock, patch

import pytest

from allotment_scraper import cli
from allotment_scraper.config import CrawlSettings
from allotment_scraper.core.errors import WaitTimeoutError
from allotment_scraper.core.schemas import CrawlReport, LeafResult, Option


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr("allotment_scraper.config.load_dotenv", lambda *a, **k: False)


def test_parser_maps_flags_to_settings_names():
    args = cli.build_parser().parse_args(
        ["--output", "out", "--headed", "--navigation-timeout", "1000", "--no-summary"]
    )

    assert args.output_dir == "out"
    assert args.headless is False
    assert args.navigation_timeout_ms == 1000
    assert args.no_summary is True
    assert args.target_url is None


def test_headless_flag_left_unset_by_default():
    assert cli.build_parser().parse_args([]).headless is None


def test_main_reports_failures_and_exits_zero(capsys):
    report = CrawlReport(
        started_at="2025-08-01T10:00:00",
        leaves=[
            LeafResult(
                top=Option(label="A", value="a"),
                second=Option(label="X", value="x"),
                status="FAILED",
                reason="Timed out",
            )
        ],
    )

    with patch("allotment_scraper.cli.run_crawl", new=AsyncMock(return_value=report)) as run_crawl:
        assert cli.main(["--output", "out", "--no-summary"]) == 0

    settings = run_crawl.await_args[0][0]
    assert settings.output_dir == "out"
    assert run_crawl.await_args[1] == {"write_summary": False}
    assert "A -> X: Timed out" in capsys.readouterr().out


def test_main_returns_one_on_fatal_error(capsys):
    failing = AsyncMock(side_effect=WaitTimeoutError("allotment link never appeared"))

    with patch("allotment_scraper.cli.run_crawl", new=failing):
        assert cli.main([]) == 1

    assert "allotment link never appeared" in capsys.readouterr().err


@pytest.mark.asyncio
async def test_run_crawl_closes_browser_and_writes_summary(tmp_path):
    report = CrawlReport(started_at="2025-08-01T10:00:00")
    navigator = AsyncMock()
    navigator.__aenter__.return_value = navigator
    settings = CrawlSettings(output_dir=str(tmp_path))

    with patch("allotment_scraper.cli.FormNavigator", return_value=navigator) as factory, patch(
        "allotment_scraper.cli.crawl", new=AsyncMock(return_value=report)
    ) as crawl:
        assert await cli.run_crawl(settings) is report

    factory.assert_called_once_with(settings)
    assert crawl.await_args[0][0] is navigator
    assert crawl.await_args[0][2] == settings.selectors.results_table
    navigator.__aexit__.assert_awaited_once()
    assert (tmp_path / "crawl_summary.json").exists()


def test_main_rejects_non_positive_timeout(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--navigation-timeout", "0"])

    assert excinfo.value.code == 2
    assert "invalid settings" in capsys.readouterr().err


def test_main_rejects_unparsable_environment_value(monkeypatch, capsys):
    monkeypatch.setenv("ALLOTMENT_HEADLESS", "maybe")

    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 2
    assert "ALLOTMENT_HEADLESS" in capsys.readouterr().err
