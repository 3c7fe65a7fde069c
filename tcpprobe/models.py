# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Attempt results and the aggregated probe report."""

from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ProbeError


@dataclass
class AttemptResult:
    seq: int
    connect_time: Optional[float] = None
    time: Optional[float] = None
    match: Optional[bool] = None
    error: Optional[ProbeError] = None
    bytes_received: Optional[int] = None
    data: Optional[bytes] = None

    @property
    def connected(self):
        return self.connect_time is not None

    def to_dict(self):
        out = {"seq": self.seq}
        if self.connect_time is not None:
            out["connect_time"] = self.connect_time
        if self.time is not None:
            out["time"] = self.time
        if self.match is not None:
            out["match"] = self.match
        if self.error is not None:
            out["error"] = f"{type(self.error).__name__}: {self.error}"
        if self.bytes_received is not None:
            out["bytes_received"] = self.bytes_received
        if self.data is not None:
            out["data"] = self.data.decode("utf-8", errors="replace")
        return out


@dataclass
class ProbeReport:
    address: str
    port: int
    attempts: int
    dropped: int
    avg: Optional[float] = None
    max: Optional[float] = None
    min: Optional[float] = None
    matches: Optional[int] = None
    errors: Optional[int] = None
    con_avg: Optional[float] = None
    con_max: Optional[float] = None
    con_min: Optional[float] = None
    probe_mode: bool = False
    results: List[AttemptResult] = field(default_factory=list)

    def to_dict(self):
        out = {
            "address": self.address,
            "port": self.port,
            "attempts": self.attempts,
            "dropped": self.dropped,
        }
        if self.probe_mode:
            out["matches"] = self.matches
            out["errors"] = self.errors
        out.update(avg=self.avg, max=self.max, min=self.min)
        if self.probe_mode:
            out.update(con_avg=self.con_avg, con_max=self.con_max, con_min=self.con_min)
        out["results"] = [result.to_dict() for result in self.results]
        return out
