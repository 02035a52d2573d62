"""Tests for core.sink."""

import json
import threading

from core.models import FoundCredential
from core.sink import ResultSink


def test_sink_truncates_existing_file(tmp_path):
    path = tmp_path / "out.jsonl"
    path.write_text('{"old": true}\n')
    ResultSink(str(path))
    assert path.read_text() == ""


def test_sink_appends_one_line_per_finding(tmp_path):
    path = tmp_path / "out.jsonl"
    sink = ResultSink(str(path))
    sink.record(FoundCredential(host="10.0.0.1", port=6379))
    sink.record(FoundCredential(host="10.0.0.2", port=6380, username="bob", password="pw1"))

    lines = path.read_text().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[1])["username"] == "bob"
    assert len(sink) == 2


def test_sink_without_path_only_collects():
    sink = ResultSink()
    sink.record(FoundCredential(host="h", port=1, password="x"))
    assert [f.password for f in sink.found] == ["x"]


def test_sink_concurrent_records(tmp_path):
    path = tmp_path / "out.jsonl"
    sink = ResultSink(str(path))

    def record_many(n):
        for i in range(50):
            sink.record(FoundCredential(host="h", port=1, password=f"{n}-{i}"))

    threads = [threading.Thread(target=record_many, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    records = [json.loads(line) for line in path.read_text().splitlines()]
    assert len(records) == 200
