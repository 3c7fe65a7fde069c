# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

from .config import ProbeConfig, resolve_config
from .errors import (
    ConnectError,
    ConnectTimeout,
    InvocationContractError,
    MaxResponseBytesExceeded,
    ProbeError,
    ResponseTimeout,
    SocketTimeout,
    TransportError,
)
from .models import AttemptResult, ProbeReport
from .probe import async_ping, async_probe, ping, probe

__all__ = [
    "AttemptResult",
    "ConnectError",
    "ConnectTimeout",
    "InvocationContractError",
    "MaxResponseBytesExceeded",
    "ProbeConfig",
    "ProbeError",
    "ProbeReport",
    "ResponseTimeout",
    "SocketTimeout",
    "TransportError",
    "async_ping",
    "async_probe",
    "ping",
    "probe",
    "resolve_config",
]
