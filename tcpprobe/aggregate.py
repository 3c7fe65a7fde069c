# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Summary statistics over completed attempts.

Averages and extremes only consider attempts that connected. When none did
they are None rather than zero.
"""

from .models import ProbeReport


def _stats(values):
    if not values:
        return None, None, None
    return sum(values) / len(values), max(values), min(values)


def aggregate(config, results):
    times = [r.time for r in results if r.time is not None]
    avg, max_time, min_time = _stats(times)
    report = ProbeReport(
        address=config.address,
        port=config.port,
        attempts=config.attempts,
        dropped=len(results) - len(times),
        avg=avg,
        max=max_time,
        min=min_time,
        probe_mode=config.probe_mode,
        results=list(results),
    )
    if config.probe_mode:
        connect_times = [r.connect_time for r in results if r.connect_time is not None]
        report.con_avg, report.con_max, report.con_min = _stats(connect_times)
        report.matches = sum(1 for r in results if r.match is True)
        report.errors = sum(1 for r in results if r.error is not None)
    return report
