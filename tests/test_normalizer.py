# ContainerWatch - Normalizer tests
import json
import logging

import pytest

from containerwatch.collector.event_queue import EventQueue
from containerwatch.event_filter import ConfigEventFilter
from containerwatch.models import UNKNOWN_TIME, Severity
from containerwatch.normalizer import EventNormalizer


def _errors(caplog):
    return [r for r in caplog.records if r.levelno >= logging.ERROR]


@pytest.fixture(autouse=True)
def _debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="containerwatch")


def test_container_die_without_image(sink, allow_all):
    norm = EventNormalizer(allow_all, sink)
    n = norm.handle_event({"Type": "container", "Action": "die", "id": "abcdef0123456789"})
    assert n.severity == Severity.WARNING
    assert n.scope == "container.id=abcdef012345"
    assert n.title == "Container Died"
    assert n.body == "Event: die"
    assert n.timestamp_seconds == UNKNOWN_TIME
    assert n.tags == {"source": "container-runtime"}
    assert sink.delivered == [n]


def test_untag_with_digest_id_matching_image(sink, allow_all):
    norm = EventNormalizer(allow_all, sink)
    n = norm.handle_event({
        "Type": "image",
        "Action": "untag",
        "id": "sha256:deadbeefcafef00d0123456789",
        "Actor": {"Attributes": {"image": "deadbeefcafef00d0123456789"}},
    })
    assert n.scope == "container.image=deadbeefcafef00d0123456789"
    assert n.title == "Image Untagged"
    assert n.body == "Event: untag; Image: deadbeefcafef00d0123456789"
    assert n.severity == Severity.INFORMATION


def test_unknown_action_is_dropped_with_one_error(sink, allow_all, caplog):
    norm = EventNormalizer(allow_all, sink)
    out = norm.process([
        {"Type": "container", "Action": "frobnicate", "id": "abc"},
        {"Type": "container", "Action": "start", "id": "abc"},
    ])
    assert [n.title for n in out] == ["Container Started"]
    errors = _errors(caplog)
    assert len(errors) == 1
    assert "status not supported: frobnicate" in errors[0].getMessage()
    assert any('"Action": "frobnicate"' in r.getMessage() for r in caplog.records)


def test_filtered_category_skips_severity_lookup(sink, caplog, monkeypatch):
    looked_up = []
    monkeypatch.setattr("containerwatch.normalizer.severity_of", lambda a: looked_up.append(a))
    norm = EventNormalizer(ConfigEventFilter.from_config({"container": "all"}), sink)
    assert norm.handle_event({"Type": "network", "Action": "connect", "id": "n1"}) is None
    assert looked_up == []
    assert sink.delivered == []
    assert not _errors(caplog)
    assert any(
        r.levelno == logging.DEBUG and "not permitted by filter: network:connect" in r.getMessage()
        for r in caplog.records
    )


def test_no_filter_rejects_everything(sink):
    norm = EventNormalizer(None, sink)
    assert norm.handle_event({"Type": "container", "Action": "die", "id": "abc"}) is None
    assert sink.delivered == []


def test_body_annotations_and_time(sink, allow_all):
    norm = EventNormalizer(allow_all, sink, machine_id="02:42:ac:11:00:02")
    n = norm.handle_event({
        "Type": "container",
        "status": "oom",
        "id": "0123456789abcdef",
        "time": 1700000000,
        "Actor": {"ID": "0123456789abcdef", "Attributes": {"image": "redis:7", "name": "cache"}},
    })
    assert n.title == "Container Out of Memory"
    assert n.body == "Event: oom; Image: redis:7; Name: cache"
    assert n.scope == "host.mac=02:42:ac:11:00:02 and container.id=0123456789ab"
    assert n.timestamp_seconds == 1700000000


def test_missing_category_keeps_action_as_title(sink, allow_all):
    n = EventNormalizer(allow_all, sink).handle_event({"Action": "pull", "id": "nginx"})
    assert n.title == "pull"
    assert n.scope == "container.image=nginx"


def test_rendering_is_repeatable(sink, allow_all):
    payload = {
        "Type": "volume",
        "Action": "mount",
        "id": "vol0123456789abcdef",
        "time": 5,
        "Actor": {"Attributes": {"name": "data"}},
    }
    norm = EventNormalizer(allow_all, sink)
    first = norm.handle_event(payload)
    second = norm.handle_event(payload)
    assert first == second
    assert first.to_string() == second.to_string()


def test_malformed_payloads_are_reported_and_skipped(sink, allow_all, caplog):
    norm = EventNormalizer(allow_all, sink)
    out = norm.process([None, ["not", "an", "object"], {"Type": "container", "Action": "kill", "id": "x"}])
    assert len(out) == 1
    errors = _errors(caplog)
    assert len(errors) == 2
    assert "event is null" in errors[0].getMessage()


def test_sink_failure_does_not_stop_batch(allow_all, caplog):
    class Broken:
        calls = 0

        def deliver(self, notification):
            Broken.calls += 1
            raise OSError("disk full")

    out = EventNormalizer(allow_all, Broken()).process([
        {"Type": "container", "Action": "start", "id": "a"},
        {"Type": "container", "Action": "stop", "id": "b"},
    ])
    assert len(out) == 2
    assert Broken.calls == 2
    assert "Notification delivery failed" in caplog.text


def test_run_cycle_drains_queue_in_order(sink, allow_all):
    queue = EventQueue()
    for action in ("create", "start", "die"):
        queue.append({"Type": "container", "Action": action, "id": "abcdef0123456789"})
    out = EventNormalizer(allow_all, sink).run_cycle(queue)
    assert [n.title for n in out] == ["Container Created", "Container Started", "Container Died"]
    assert len(queue) == 0
    assert EventNormalizer(allow_all, sink).run_cycle(queue) == []


def test_verbose_echoes_accepted_events(sink, allow_all, capsys):
    payload = {"Type": "container", "Action": "pause", "id": "abc"}
    EventNormalizer(allow_all, sink, verbose=True).handle_event(payload)
    assert json.loads(capsys.readouterr().out) == payload
