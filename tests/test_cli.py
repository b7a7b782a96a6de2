"""Tests for the command-line interface."""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from capture_hub.cli.main import app
from capture_hub.db.engine import reset_engine

runner = CliRunner()

PAYLOAD = {
    "task": {
        "inputParameters": {"originUrl": "https://www.olemisssports.com/calendar"},
        "capturedLists": {"OleSports": [{"EventDate": "May 18", "Location": "Tucson", "Sports": "SB"}]},
    }
}

FEED = """<rss><channel>
<item><title>Softball vs Arizona</title><description>vs Arizona
W 5-3</description><ev:location>Tucson</ev:location><s:opponent>Arizona</s:opponent></item>
</channel></rss>"""


@pytest.fixture
def workdir(monkeypatch):
    """Temporary directory holding the database and input files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("DATABASE_URL", str(Path(tmpdir) / "cli.db"))
        monkeypatch.delenv("LOG_DIR", raising=False)
        reset_engine()
        yield Path(tmpdir)
        reset_engine()


class TestBasics:
    """Tests for top-level commands."""

    def test_version(self) -> None:
        """Test the version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Capture Hub v" in result.output

    def test_check_config(self, workdir: Path) -> None:
        """Test the configuration report."""
        result = runner.invoke(app, ["check-config"])
        assert result.exit_code == 0
        assert "cli.db" in result.output

    def test_init_db(self, workdir: Path) -> None:
        """Test creating tables."""
        result = runner.invoke(app, ["init-db"])
        assert result.exit_code == 0
        assert (workdir / "cli.db").exists()


class TestIngestCommands:
    """Tests for ingest commands."""

    def test_replay_then_inspect(self, workdir: Path) -> None:
        """Test replaying a payload and browsing the result."""
        payload_file = workdir / "delivery.json"
        payload_file.write_text(json.dumps(PAYLOAD))

        result = runner.invoke(app, ["ingest", "replay", str(payload_file)])
        assert result.exit_code == 0, result.output
        assert "captured_lists" in result.output

        result = runner.invoke(app, ["docs", "list", "captured_lists"])
        assert result.exit_code == 0
        assert "olemisssports.com" in result.output

        result = runner.invoke(app, ["docs", "show", "captured_lists", "olemisssports.com"])
        assert result.exit_code == 0
        assert "Tucson" in result.output

        result = runner.invoke(app, ["docs", "categories", "captured_lists", "olemisssports.com"])
        assert result.exit_code == 0
        assert "OleSports" in result.output

    def test_replay_malformed(self, workdir: Path) -> None:
        """Test a payload without a task envelope."""
        payload_file = workdir / "bad.json"
        payload_file.write_text(json.dumps({"data": {}}))

        result = runner.invoke(app, ["ingest", "replay", str(payload_file)])
        assert result.exit_code == 1
        assert "missing_task" in result.output

    def test_replay_missing_file(self, workdir: Path) -> None:
        """Test a payload file that does not exist."""
        result = runner.invoke(app, ["ingest", "replay", str(workdir / "nope.json")])
        assert result.exit_code == 1

    def test_feed(self, workdir: Path) -> None:
        """Test parsing a feed file as JSON."""
        feed_file = workdir / "feed.xml"
        feed_file.write_text(FEED)

        result = runner.invoke(app, ["ingest", "feed", str(feed_file), "--json"])
        assert result.exit_code == 0
        assert '"score": "W 5-3"' in result.output

    def test_docs_unknown_collection(self, workdir: Path) -> None:
        """Test listing an unknown collection."""
        result = runner.invoke(app, ["docs", "list", "users"])
        assert result.exit_code == 1
