"""Tests for the command-line interface."""

import json
from unittest.mock import Mock, patch

import pytest

from seotoolkit import cli
from seotoolkit.auditor import SEOAuditor
from seotoolkit.database import LocalSqliteStore
from seotoolkit.fetcher import PageFetchError
from seotoolkit.models import FetchedPage, KeywordResearchResult, RankCheckResult, TrendData


PAGE = (
    '<html lang="en"><head><title>Coffee Brewing Guide</title></head>'
    '<body><h1>Coffee</h1><p>Brew coffee with fresh beans.</p></body></html>'
)


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("seotoolkit.cli.setup_logging"):
        yield


@pytest.fixture
def fetcher():
    fetcher = Mock()
    fetcher.fetch_for_analysis.return_value = FetchedPage(
        url="https://example.com/", html=PAGE, status_code=200, load_time_ms=500
    )
    return fetcher


@pytest.fixture
def auditor_cls(fetcher):
    """Patch the CLI's auditor to use a stub fetcher."""
    with patch("seotoolkit.cli.SEOAuditor") as auditor_cls:
        auditor_cls.side_effect = lambda **kwargs: SEOAuditor(fetcher=fetcher, **kwargs)
        yield auditor_cls


class TestParser:
    """Test cases for argument parsing."""

    def test_global_options(self):
        """Test global flags precede the subcommand."""
        args = cli.build_parser().parse_args(["--output", "json", "--save", "audit", "example.com"])

        assert args.output == "json"
        assert args.save is True
        assert args.command == "audit"
        assert args.url == "example.com"

    def test_rank_options(self):
        """Test rank accepts country and city."""
        args = cli.build_parser().parse_args(["rank", "seo", "example.com", "--country", "US", "--city", "Austin"])

        assert args.country == "US"
        assert args.city == "Austin"

    def test_no_command_prints_help(self, capsys):
        """Test running without a subcommand shows help."""
        cli.main([])
        assert "usage:" in capsys.readouterr().out


class TestCommands:
    """Test cases for subcommand execution."""

    def test_audit_text(self, auditor_cls, capsys):
        """Test the text audit report."""
        cli.main(["audit", "example.com"])

        out = capsys.readouterr().out
        assert "SEO Audit for: https://example.com/" in out
        assert "Overall Score" in out
        assert "Missing meta description" in out

    def test_audit_json_to_file(self, auditor_cls, tmp_path, capsys):
        """Test JSON output written to a file."""
        output_file = tmp_path / "audit.json"
        cli.main(["--output", "json", "--output-file", str(output_file), "audit", "example.com"])

        data = json.loads(output_file.read_text())
        assert data["url"] == "https://example.com/"
        assert data["title"] == "Coffee Brewing Guide"
        assert "Results written to" in capsys.readouterr().out

    def test_on_page_json(self, auditor_cls, capsys):
        """Test the on-page report as JSON."""
        cli.main(["-o", "json", "on-page", "example.com", "coffee"])

        data = json.loads(capsys.readouterr().out)
        assert data["keyword"] == "coffee"
        assert data["analysis"]["in_title"] is True

    def test_fetch_error_exits(self, auditor_cls, fetcher, capsys):
        """Test fetch failures exit with status 1."""
        fetcher.fetch_for_analysis.side_effect = PageFetchError("https://x.com", "Page returned status code 404")

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["audit", "x.com"])

        assert exc_info.value.code == 1
        assert "Error: Page returned status code 404" in capsys.readouterr().out

    def test_save_uses_store(self, auditor_cls):
        """Test --save wires the store into the auditor and closes it."""
        store = Mock()
        with patch("seotoolkit.cli.get_db_client", return_value=store):
            cli.main(["--save", "audit", "example.com"])

        assert store.insert.call_args.args[0] == "seo_audits"
        store.close.assert_called_once()

    def test_trends_json(self, capsys):
        """Test several keywords are compared."""
        with patch("seotoolkit.cli.KeywordResearcher") as researcher_cls:
            researcher_cls.return_value.compare_keywords.return_value = [
                TrendData("tea", 61, "stable"), TrendData("coffee", 100, "rising"),
            ]
            cli.main(["-o", "json", "trends", "tea", "coffee"])

        data = json.loads(capsys.readouterr().out)
        assert [item["keyword"] for item in data] == ["tea", "coffee"]
        assert data[1]["interest"] == 100

    def test_trends_text(self, capsys):
        """Test a single keyword trend with a volume estimate."""
        with patch("seotoolkit.cli.KeywordResearcher") as researcher_cls:
            researcher_cls.return_value.estimate_trend.return_value = TrendData("coffee", 50, "stable")
            cli.main(["trends", "coffee"])

        assert "coffee: 50/100, stable (~2500 searches)" in capsys.readouterr().out

    def test_rank_text(self, capsys):
        """Test the rank report."""
        result = RankCheckResult("seo", "example.com", 4, "https://example.com/seo", "IN")
        with patch("seotoolkit.cli.RankTracker") as tracker_cls:
            tracker_cls.return_value.check_rank.return_value = result
            cli.main(["rank", "seo", "example.com"])

        assert "example.com ranks #4" in capsys.readouterr().out

    def test_rank_save_records_history(self):
        """Test --save stores the rank check without building an auditor."""
        store = Mock()
        result = RankCheckResult("seo", "example.com", 4, "https://example.com/seo", "IN", country="IN")
        with patch("seotoolkit.cli.RankTracker") as tracker_cls, \
                patch("seotoolkit.cli.SEOAuditor") as auditor_cls, \
                patch("seotoolkit.cli.get_db_client", return_value=store):
            tracker_cls.return_value.check_rank.return_value = result
            cli.main(["--save", "rank", "seo", "example.com"])

        auditor_cls.assert_not_called()
        table, record = store.insert.call_args.args
        assert table == "rank_tracking"
        assert record["position"] == 4
        assert record["device"] == "desktop"
        store.close.assert_called_once()

    def test_research_save(self):
        """Test --save stores keyword research."""
        store = Mock()
        result = KeywordResearchResult(
            "coffee", ("coffee beans",), (), ("coffee beans",), ("what is coffee",),
            70, 50000, "Low", "$3.00", "High", "Stable",
        )
        with patch("seotoolkit.cli.KeywordResearcher") as researcher_cls, \
                patch("seotoolkit.cli.get_db_client", return_value=store):
            researcher_cls.return_value.research.return_value = result
            cli.main(["--save", "research", "coffee"])

        assert store.insert.call_args.args[0] == "keyword_research"
        store.close.assert_called_once()

    def test_store_closed_on_error(self, auditor_cls, fetcher):
        """Test the store is closed when a command fails."""
        fetcher.fetch_for_analysis.side_effect = PageFetchError("https://x.com", "Page returned status code 500")
        store = Mock()
        with patch("seotoolkit.cli.get_db_client", return_value=store):
            with pytest.raises(SystemExit):
                cli.main(["--save", "audit", "x.com"])

        store.close.assert_called_once()


class TestTrackingCommands:
    """Test cases for the competitor and rank history subcommands."""

    @pytest.fixture(autouse=True)
    def local_store(self, tmp_path):
        """Give every invocation a fresh connection to the same database file."""
        db_url = f"sqlite:///{tmp_path / 'cli.db'}"
        with patch("seotoolkit.cli.get_db_client", side_effect=lambda: LocalSqliteStore(db_url=db_url)):
            yield db_url

    def test_competitors_add_list_remove(self, capsys):
        """Test the competitor lifecycle."""
        cli.main(["competitors", "add", "www.mine.com", "rival.com"])
        assert "Tracking rival.com against mine.com (id 1)" in capsys.readouterr().out

        cli.main(["-o", "json", "competitors", "list"])
        pairs = json.loads(capsys.readouterr().out)
        assert [(p["id"], p["competitor_domain"]) for p in pairs] == [(1, "rival.com")]

        cli.main(["competitors", "remove", "1"])
        assert "Deleted competitor 1" in capsys.readouterr().out

        cli.main(["competitors", "list"])
        assert "No competitors tracked yet" in capsys.readouterr().out

    def test_remove_unknown_competitor(self, capsys):
        """Test removing an unknown id reports it."""
        cli.main(["competitors", "remove", "42"])
        assert "No competitor with id 42" in capsys.readouterr().out

    def test_blank_competitor_exits(self, capsys):
        """Test invalid input exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["competitors", "add", "mine.com", ""])

        assert exc_info.value.code == 1
        assert "Both domains are required" in capsys.readouterr().out

    def test_rank_history_list_and_delete(self, local_store, capsys):
        """Test stored rank checks are listed newest first and deletable."""
        store = LocalSqliteStore(db_url=local_store)
        for keyword, position in (("seo", 4), ("audit", None)):
            store.insert("rank_tracking", {
                "keyword": keyword, "domain": "example.com", "position": position,
                "location": "IN", "country": "IN", "device": "desktop",
            })
        store.close()

        cli.main(["-o", "json", "rank-history", "list", "--limit", "1"])
        history = json.loads(capsys.readouterr().out)
        assert [entry["keyword"] for entry in history] == ["audit"]

        cli.main(["rank-history", "delete", "1"])
        assert "Deleted rank check 1" in capsys.readouterr().out

        cli.main(["rank-history", "list"])
        out = capsys.readouterr().out
        assert "'audit': not found (IN, desktop)" in out
        assert "'seo'" not in out

    def test_tracking_subcommand_requires_action(self):
        """Test an action is required."""
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["competitors"])
