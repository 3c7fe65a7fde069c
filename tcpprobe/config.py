# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Probe configuration.

Config keys:
- address (str, optional, default "localhost")
- port (int, optional, 1-65535, default 80)
- attempts (int, optional, default 1; ping defaults to 10)
- timeout (float, optional, milliseconds, default 5000; connect and idle ceiling)
- response_timeout (float, optional, milliseconds, default timeout)
- request (str or bytes, optional, sent right after connect)
- exit_request (str or bytes, optional, sent right before closing)
- match (str, bytes, re.Pattern or callable, optional)
- capture (bool, optional, default False)
- max_response_bytes (int, optional, default 50000)
- no_delay (bool, optional, default True; set on the connected socket in
  request/response mode, plain mode writes nothing for it to affect)
- encoding (str, optional, default "utf8"; used for str request/match)

Setting any of request, exit_request, match, capture or max_response_bytes
switches the probe from plain connect timing to request/response mode.

Example:
cfg = {
    "address": "127.0.0.1",
    "port": 22,
    "timeout": 2000,
    "match": "SSH-",
    "capture": True,
}
"""

import codecs
import re
from dataclasses import dataclass, fields
from typing import Any, Optional

from .errors import InvocationContractError
from .matchers import build_matcher

DEFAULT_MAX_RESPONSE_BYTES = 50000
PING_ATTEMPTS = 10


@dataclass(frozen=True)
class ProbeConfig:
    address: str = "localhost"
    port: int = 80
    attempts: int = 1
    timeout: float = 5000
    response_timeout: Optional[float] = None
    request: bytes = b""
    exit_request: Optional[bytes] = None
    match: Any = None
    capture: bool = False
    max_response_bytes: Optional[int] = None
    no_delay: bool = True
    encoding: str = "utf8"

    @property
    def probe_mode(self):
        return bool(
            self.request
            or self.exit_request
            or self.capture
            or self.match is not None
            or self.max_response_bytes is not None
        )

    @property
    def response_limit(self):
        if self.max_response_bytes is None:
            return DEFAULT_MAX_RESPONSE_BYTES
        return self.max_response_bytes

    @property
    def response_deadline(self):
        if self.response_timeout is None:
            return self.timeout
        return self.response_timeout


OPTION_NAMES = frozenset(f.name for f in fields(ProbeConfig))


def _to_bytes(value, encoding, name):
    if value is None:
        return None
    if isinstance(value, str):
        return value.encode(encoding)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvocationContractError(f"{name} must be str or bytes")


def _positive(value, name, kind=float):
    try:
        value = kind(value)
    except (TypeError, ValueError):
        raise InvocationContractError(f"{name} must be a number") from None
    if value <= 0:
        raise InvocationContractError(f"{name} must be positive")
    return value


def resolve_config(options=None, **defaults):
    """Merge caller options over the defaults and validate the result.

    Caller values always win; ``defaults`` only replaces the built-in
    defaults (ping uses it for attempts). A ProbeConfig is already resolved,
    so it is only accepted when there are no defaults to apply.
    """
    if isinstance(options, ProbeConfig):
        if defaults:
            raise InvocationContractError("pass options as a mapping to apply defaults")
        return options
    merged = dict(defaults)
    merged.update(options or {})
    unknown = set(merged) - OPTION_NAMES
    if unknown:
        raise InvocationContractError(f"unknown options: {', '.join(sorted(unknown))}")

    encoding = merged.get("encoding") or "utf8"
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise InvocationContractError(f"unknown encoding: {encoding}") from None

    port = merged.get("port", 80)
    try:
        port = int(port)
    except (TypeError, ValueError):
        raise InvocationContractError("port must be an integer") from None
    if not 1 <= port <= 65535:
        raise InvocationContractError(f"port {port} out of range")

    response_timeout = merged.get("response_timeout")
    if response_timeout is not None:
        response_timeout = _positive(response_timeout, "response_timeout")
    max_response_bytes = merged.get("max_response_bytes")
    if max_response_bytes is not None:
        max_response_bytes = _positive(max_response_bytes, "max_response_bytes", int)

    return ProbeConfig(
        address=merged.get("address") or "localhost",
        port=port,
        attempts=_positive(merged.get("attempts", 1), "attempts", int),
        timeout=_positive(merged.get("timeout", 5000), "timeout"),
        response_timeout=response_timeout,
        request=_to_bytes(merged.get("request"), encoding, "request") or b"",
        exit_request=_to_bytes(merged.get("exit_request"), encoding, "exit_request") or None,
        match=build_matcher(merged.get("match"), encoding),
        capture=bool(merged.get("capture", False)),
        max_response_bytes=max_response_bytes,
        no_delay=bool(merged.get("no_delay", True)),
        encoding=encoding,
    )


def config_from_mapping(item):
    """Build probe options from a YAML entry.

    ``match_regex: true`` compiles ``match`` as a regular expression; keys
    that only matter to the runner (name, type, command, ...) are dropped.
    """
    options = {key: value for key, value in item.items() if key in OPTION_NAMES}
    if item.get("match_regex") and options.get("match") is not None:
        try:
            options["match"] = re.compile(str(options["match"]))
        except re.error as exc:
            raise InvocationContractError(f"invalid match regex: {exc}") from None
    return options
