# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Single TCP attempt.

Plain mode only times the connect. Probe mode runs ProbeAttempt, an asyncio
protocol whose callbacks (data, close, socket error) race the response
deadline and the idle timer to finish the attempt. _finalize claims the
attempt on first call; every later trigger is a no-op, so each attempt
yields exactly one AttemptResult.
"""

import asyncio
import logging
import socket

from .errors import (
    ConnectError,
    ConnectTimeout,
    MaxResponseBytesExceeded,
    ResponseTimeout,
    SocketTimeout,
    TransportError,
)
from .models import AttemptResult
from .util import elapsed_ms, now, seconds

log = logging.getLogger(__name__)

# name resolution raises UnicodeError (idna) or ValueError (embedded NUL)
_CONNECT_FAILURES = (asyncio.TimeoutError, OSError, UnicodeError, ValueError)


def _set_no_delay(transport, no_delay):
    sock = transport.get_extra_info("socket")
    if sock is None:
        return
    try:
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1 if no_delay else 0)
    except OSError as exc:
        log.debug("could not set TCP_NODELAY: %s", exc)


def _connect_error(exc, config):
    target = f"{config.address}:{config.port}"
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return ConnectTimeout(f"connect to {target} timed out after {config.timeout:g}ms", exc)
    return ConnectError(f"connect to {target} failed: {exc}", exc)


class _Closing(asyncio.Protocol):
    def __init__(self):
        self.closed = asyncio.get_running_loop().create_future()

    def connection_lost(self, exc):
        if not self.closed.done():
            self.closed.set_result(None)


async def plain_attempt(seq, config):
    loop = asyncio.get_running_loop()
    start = now()
    try:
        transport, protocol = await asyncio.wait_for(
            loop.create_connection(_Closing, config.address, config.port),
            timeout=seconds(config.timeout),
        )
    except _CONNECT_FAILURES as exc:
        error = _connect_error(exc, config)
        log.debug("attempt %d: %s", seq, error)
        return AttemptResult(seq=seq, error=error)
    elapsed = elapsed_ms(start)
    # nothing is written in plain mode, so no_delay has nothing to act on
    transport.abort()
    await protocol.closed
    log.debug("attempt %d: connected in %.3fms", seq, elapsed)
    return AttemptResult(seq=seq, connect_time=elapsed, time=elapsed)


class ProbeAttempt(asyncio.Protocol):
    """One request/response attempt.

    States: connecting (no transport yet), connected (``connect_time`` set),
    finalized (``done`` resolved). Triggers that finalize: match, response
    cap exceeded, connection lost, connect failure, response deadline and
    idle timeout.
    """

    def __init__(self, seq, config):
        self.seq = seq
        self.config = config
        self.done = None
        self._loop = None
        self._start = None
        self._closed = None
        self._transport = None
        self._connect_task = None
        self._deadline = None
        self._idle = None
        self._finalized = False
        self._connect_time = None
        self._buffer = bytearray()
        self._received = False
        self._matched = False
        self._exceeded = False
        self._exit_sent = False
        self._error = None

    @property
    def finalized(self):
        return self._finalized

    def arm(self, loop):
        """Start the attempt clock and the response deadline."""
        self._loop = loop
        self._start = now()
        self.done = loop.create_future()
        self._closed = loop.create_future()
        self._deadline = loop.call_later(
            seconds(self.config.response_deadline), self.on_response_timeout
        )

    async def run(self):
        loop = asyncio.get_running_loop()
        self.arm(loop)
        self._connect_task = loop.create_task(self._connect())
        try:
            return await self.done
        finally:
            await self._release()

    async def _connect(self):
        try:
            await asyncio.wait_for(
                self._loop.create_connection(lambda: self, self.config.address, self.config.port),
                timeout=seconds(self.config.timeout),
            )
        except _CONNECT_FAILURES as exc:
            self._finalize(_connect_error(exc, self.config))

    async def _release(self):
        self._cancel_timers()
        task = self._connect_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        transport = self._transport
        if transport is None:
            return
        if not transport.is_closing():
            transport.close()
        try:
            await asyncio.wait_for(asyncio.shield(self._closed), seconds(self.config.timeout))
        except asyncio.TimeoutError:
            log.debug("attempt %d: close did not complete, aborting", self.seq)
            transport.abort()
            await self._closed

    # protocol callbacks

    def connection_made(self, transport):
        self._transport = transport
        if self._finalized:
            transport.abort()
            return
        self._connect_time = elapsed_ms(self._start)
        _set_no_delay(transport, self.config.no_delay)
        if self.config.request:
            transport.write(self.config.request)
        self._idle = self._loop.call_later(seconds(self.config.timeout), self.on_idle_timeout)
        log.debug("attempt %d: connected in %.3fms", self.seq, self._connect_time)

    def data_received(self, data):
        if self._finalized:
            return
        self._received = True
        self._reset_idle()
        room = self.config.response_limit - len(self._buffer)
        if len(data) > room:
            self._exceeded = True
            data = data[:room]
        self._buffer += data

        if self.config.match is not None:
            self._matched = bool(self.config.match(bytes(self._buffer), self.config))
        if self._exceeded:
            self._error = self._error or MaxResponseBytesExceeded(
                f"response exceeded {self.config.response_limit} bytes"
            )
        if self._matched or self._exceeded:
            self._shutdown()
            self._finalize()

    def connection_lost(self, exc):
        if self._closed is not None and not self._closed.done():
            self._closed.set_result(None)
        if exc is None:
            self._finalize()
        else:
            self._finalize(TransportError(f"connection lost: {exc}", exc))

    # timers

    def on_response_timeout(self):
        if self._connect_time is None:
            self._finalize(
                ConnectTimeout(
                    f"connect to {self.config.address}:{self.config.port} did not complete "
                    f"within {self.config.response_deadline:g}ms"
                )
            )
        else:
            self._finalize(
                ResponseTimeout(f"no response within {self.config.response_deadline:g}ms")
            )

    def on_idle_timeout(self):
        self._finalize(SocketTimeout(f"socket idle for {self.config.timeout:g}ms"))

    def _reset_idle(self):
        if self._idle is not None:
            self._idle.cancel()
            self._idle = self._loop.call_later(seconds(self.config.timeout), self.on_idle_timeout)

    def _cancel_timers(self):
        for handle in (self._deadline, self._idle):
            if handle is not None:
                handle.cancel()

    # shutdown

    def _send_exit(self):
        if self.config.exit_request is None or self._exit_sent:
            return
        transport = self._transport
        if transport is None or transport.is_closing():
            return
        self._exit_sent = True
        try:
            transport.write(self.config.exit_request)
        except (OSError, RuntimeError) as exc:
            # socket may already be half-closed
            log.debug("attempt %d: exit request not sent: %s", self.seq, exc)

    def _shutdown(self):
        self._send_exit()
        transport = self._transport
        if transport is not None and not transport.is_closing() and transport.can_write_eof():
            transport.write_eof()

    def _finalize(self, error=None):
        if self._finalized:
            return
        self._finalized = True
        self._cancel_timers()
        self._send_exit()
        if self._transport is not None and not self._transport.is_closing():
            self._transport.close()

        connected = self._connect_time is not None
        result = AttemptResult(
            seq=self.seq,
            connect_time=self._connect_time,
            time=elapsed_ms(self._start) if connected else None,
            error=error or self._error,
        )
        if self.config.match is not None and connected:
            result.match = self._matched
        if self._received:
            result.bytes_received = len(self._buffer)
            if self.config.capture:
                result.data = bytes(self._buffer)
        log.debug("attempt %d: finalized (%s)", self.seq, result.error or "ok")
        if not self.done.done():
            self.done.set_result(result)


async def run_attempt(seq, config):
    if not config.probe_mode:
        return await plain_attempt(seq, config)
    return await ProbeAttempt(seq, config).run()
