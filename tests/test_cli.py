"""Tests for the Typer CLI."""

from typer.testing import CliRunner

from pdlogstash.cli import app
from pdlogstash.config import settings

runner = CliRunner()


def test_run_requires_api_key(monkeypatch):
    monkeypatch.setattr(settings, "pagerduty_api_key", None)

    result = runner.invoke(app, ["run"])

    assert result.exit_code == 1
    assert "API key is required" in result.output


def test_run_passes_options_through(monkeypatch):
    calls = {}

    def fake_run_forward(time_range, *, api_key, transmitter, page_size, send_delay_seconds):
        calls.update(
            time_range=time_range,
            api_key=api_key,
            address=transmitter.address,
            page_size=page_size,
            send_delay_seconds=send_delay_seconds,
        )
        return {"since": time_range.since, "until": time_range.until, "pages": 2, "fetched": 3, "sent": 3, "dropped": 0}

    monkeypatch.setattr("pdlogstash.jobs.forward.run_forward", fake_run_forward)

    result = runner.invoke(
        app,
        [
            "run",
            "--pd-key", "abc",
            "--from", "2024-03-04T13:00:00Z",
            "--until", "2024-03-04T14:00:00Z",
            "--remote-addr", "127.0.0.1",
            "--remote-port", "5044",
            "--page-size", "50",
            "--send-delay", "0",
        ],
    )

    assert result.exit_code == 0, result.output
    assert calls["api_key"] == "abc"
    assert calls["time_range"].since == "2024-03-04T13:00:00Z"
    assert calls["time_range"].until == "2024-03-04T14:00:00Z"
    assert calls["address"] == ("127.0.0.1", 5044)
    assert calls["page_size"] == 50
    assert calls["send_delay_seconds"] == 0
    assert "Forwarding Results" in result.output


def test_run_reports_fatal_errors(monkeypatch):
    def failing_run_forward(*args, **kwargs):
        raise RuntimeError("HTTP 500 from /log_entries")

    monkeypatch.setattr("pdlogstash.jobs.forward.run_forward", failing_run_forward)

    result = runner.invoke(app, ["run", "--pd-key", "abc", "--dry-run"])

    assert result.exit_code == 1
    assert "HTTP 500" in result.output
