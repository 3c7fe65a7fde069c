# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import re

import pytest

from tcpprobe import InvocationContractError, ProbeConfig, resolve_config
from tcpprobe.config import config_from_mapping
from tcpprobe.matchers import BytesMatcher, PredicateMatcher, RegexMatcher


def test_defaults():
    config = resolve_config()
    assert config.address == "localhost"
    assert config.port == 80
    assert config.attempts == 1
    assert config.timeout == 5000
    assert config.response_deadline == 5000
    assert config.response_limit == 50000
    assert config.request == b""
    assert config.no_delay is True
    assert not config.probe_mode


def test_caller_values_win_over_ping_default():
    assert resolve_config({}, attempts=10).attempts == 10
    assert resolve_config({"attempts": 2}, attempts=10).attempts == 2


def test_strings_are_encoded_with_configured_encoding():
    config = resolve_config(
        {"request": "café", "exit_request": "bye", "match": "é", "encoding": "latin-1"}
    )
    assert config.request == b"caf\xe9"
    assert config.exit_request == b"bye"
    assert config.match(b"caf\xe9", config)


@pytest.mark.parametrize(
    "options",
    [
        {"request": "x"},
        {"exit_request": b"x"},
        {"capture": True},
        {"match": "x"},
        {"max_response_bytes": 50000},
    ],
)
def test_probe_mode_triggers(options):
    assert resolve_config(options).probe_mode


def test_plain_mode_with_only_connection_options():
    config = resolve_config({"address": "example.com", "port": 443, "timeout": 100, "no_delay": False})
    assert not config.probe_mode


def test_match_variants_dispatch_once():
    assert isinstance(resolve_config({"match": b"a"}).match, BytesMatcher)
    assert isinstance(resolve_config({"match": re.compile("a+")}).match, RegexMatcher)
    assert isinstance(resolve_config({"match": lambda buf, cfg: True}).match, PredicateMatcher)


def test_regex_matcher_searches_decoded_buffer():
    config = resolve_config({"match": re.compile(r"^\+OK", re.M)})
    assert config.match(b"banner\r\n+OK ready", config)
    assert not config.match(b"-ERR", config)


def test_predicate_truthy_return_counts_as_match():
    config = resolve_config({"match": lambda buf, cfg: len(buf)})
    assert config.match(b"a", config) is True
    assert config.match(b"", config) is False


@pytest.mark.parametrize(
    "options",
    [
        {"attempts": 0},
        {"port": 0},
        {"port": 70000},
        {"port": "http"},
        {"timeout": -1},
        {"response_timeout": 0},
        {"max_response_bytes": 0},
        {"match": 42},
        {"request": 42},
        {"encoding": "no-such-codec"},
        {"bogus": True},
    ],
)
def test_invalid_options_raise(options):
    with pytest.raises(InvocationContractError):
        resolve_config(options)


def test_resolved_config_is_frozen():
    config = resolve_config()
    with pytest.raises(AttributeError):
        config.port = 81
    assert resolve_config(config) is config
    assert isinstance(config, ProbeConfig)


def test_config_from_mapping_compiles_regex_and_drops_runner_keys():
    options = config_from_mapping(
        {
            "name": "ssh",
            "type": "probe",
            "address": "127.0.0.1",
            "port": 22,
            "match": r"SSH-\d",
            "match_regex": True,
            "max_avg_ms": 10,
            "command": "true",
        }
    )
    assert set(options) == {"address", "port", "match"}
    assert options["match"].pattern == r"SSH-\d"


def test_config_from_mapping_rejects_bad_regex():
    with pytest.raises(InvocationContractError):
        config_from_mapping({"match": "(", "match_regex": True})


def test_resolved_config_cannot_take_ping_defaults():
    config = resolve_config({"port": 22})
    with pytest.raises(InvocationContractError):
        resolve_config(config, attempts=10)
