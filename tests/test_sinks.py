# ContainerWatch - Notification sink tests
import json
import logging

from containerwatch.models import NormalizedNotification, Severity
from containerwatch.reporter.sinks import (
    JsonlNotificationSink,
    LoggingNotificationSink,
    MultiSink,
    build_sink,
)


def _notification(severity=Severity.WARNING):
    return NormalizedNotification(
        timestamp_seconds=1700000000,
        title="Container Killed",
        body="Event: kill; Name: web",
        scope="container.id=abcdef012345",
        severity=severity,
    )


def test_logging_sink_uses_severity_level(caplog):
    caplog.set_level(logging.INFO, logger="containerwatch.notifications")
    sink = LoggingNotificationSink()
    sink.deliver(_notification(Severity.WARNING))
    sink.deliver(_notification(Severity.INFORMATION))
    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.INFO]
    assert 'name: "Container Killed"' in caplog.records[0].getMessage()


def test_jsonl_sink_appends(tmp_path):
    path = tmp_path / "out" / "notifications.jsonl"
    sink = JsonlNotificationSink(path)
    sink.start()
    sink.deliver(_notification())
    sink.deliver(_notification(Severity.INFORMATION))
    sink.stop()
    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert len(lines) == 2
    assert lines[0]["payload"]["title"] == "Container Killed"
    assert lines[0]["payload"]["tags"] == {"source": "container-runtime"}
    assert lines[1]["payload"]["severity"] == "information"


def test_multi_sink_isolates_failures(caplog):
    class Broken:
        def deliver(self, notification):
            raise RuntimeError("boom")

    class Keep:
        def __init__(self):
            self.seen = []

        def deliver(self, notification):
            self.seen.append(notification)

    keep = Keep()
    MultiSink([Broken(), keep]).deliver(_notification())
    assert len(keep.seen) == 1
    assert "Sink Broken failed: boom" in caplog.text


def test_build_sink_from_config(tmp_path):
    sink = build_sink({"notifications": {"sinks": ["log", "jsonl"], "jsonl_file": str(tmp_path / "n.jsonl")}})
    assert [type(s).__name__ for s in sink.sinks] == ["LoggingNotificationSink", "JsonlNotificationSink"]
    sink = build_sink({"agent": {"log_dir": str(tmp_path)}, "notifications": {"sinks": ["jsonl"]}})
    sink.start()
    sink.stop()
    assert (tmp_path / "notifications.jsonl").exists()
