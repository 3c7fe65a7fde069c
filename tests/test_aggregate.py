# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import pytest

from tcpprobe import AttemptResult, ConnectError, ResponseTimeout, resolve_config
from tcpprobe.aggregate import aggregate


def test_plain_stats_skip_dropped_attempts():
    config = resolve_config({"attempts": 3})
    results = [
        AttemptResult(seq=0, error=ConnectError("refused")),
        AttemptResult(seq=1, connect_time=2.0, time=2.0),
        AttemptResult(seq=2, connect_time=4.0, time=4.0),
    ]
    report = aggregate(config, results)
    assert report.dropped == 1
    assert report.avg == pytest.approx(3.0)
    assert report.min == 2.0
    assert report.max == 4.0
    assert report.matches is None
    assert report.errors is None
    assert set(report.to_dict()) == {"address", "port", "attempts", "dropped", "avg", "max", "min", "results"}


def test_all_dropped_is_degenerate_not_zero():
    config = resolve_config({"attempts": 2})
    results = [AttemptResult(seq=i, error=ConnectError("refused")) for i in range(2)]
    report = aggregate(config, results)
    assert report.dropped == 2
    assert report.avg is None
    assert report.min is None
    assert report.max is None


def test_probe_stats_count_matches_errors_and_connect_times():
    config = resolve_config({"attempts": 3, "match": "ok"})
    results = [
        AttemptResult(seq=0, connect_time=1.0, time=5.0, match=True, bytes_received=2),
        AttemptResult(seq=1, connect_time=3.0, time=9.0, match=False, error=ResponseTimeout("late")),
        AttemptResult(seq=2, error=ConnectError("refused")),
    ]
    report = aggregate(config, results)
    assert report.dropped == 1
    assert report.matches == 1
    assert report.errors == 2
    assert report.avg == pytest.approx(7.0)
    assert (report.min, report.max) == (5.0, 9.0)
    assert report.con_avg == pytest.approx(2.0)
    assert (report.con_min, report.con_max) == (1.0, 3.0)
    out = report.to_dict()
    assert out["results"][1]["error"] == "ResponseTimeout: late"
    assert "match" not in out["results"][2]
