# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Probe entry points.

probe() and ping() run on their own event loop and return the report; when a
callback is given it is also called as callback(None, report). The async
variants are for callers that already run a loop.

Per-attempt failures never raise: they are recorded on the attempt's result.
Only invalid options or a non-callable callback raise InvocationContractError,
before any connection is opened.
"""

import asyncio
import logging

from .aggregate import aggregate
from .config import PING_ATTEMPTS, resolve_config
from .errors import InvocationContractError
from .sequencer import run_attempts

log = logging.getLogger(__name__)


async def _run(config):
    mode = "probe" if config.probe_mode else "plain"
    log.info("%s %s:%d x%d", mode, config.address, config.port, config.attempts)
    results = await run_attempts(config)
    return aggregate(config, results)


def _check_callback(callback):
    if callback is not None and not callable(callback):
        raise InvocationContractError("callback must be callable")


async def async_probe(options=None):
    return await _run(resolve_config(options))


async def async_ping(options=None):
    return await _run(resolve_config(options, attempts=PING_ATTEMPTS))


def probe(options=None, callback=None):
    """Run the probe and return its ProbeReport.

    The callback is optional; when given it must be callable and is called
    as callback(None, report). Leaving it out is not an error, since the
    report is also returned. A non-callable callback or invalid options raise
    InvocationContractError before any connection is opened.
    """
    _check_callback(callback)
    config = resolve_config(options)
    report = asyncio.run(_run(config))
    if callback is not None:
        callback(None, report)
    return report


def ping(options=None, callback=None):
    """Same as probe() with attempts defaulting to 10."""
    _check_callback(callback)
    config = resolve_config(options, attempts=PING_ATTEMPTS)
    report = asyncio.run(_run(config))
    if callback is not None:
        callback(None, report)
    return report
