# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import logging

from .prober import run_attempt

log = logging.getLogger(__name__)


async def run_attempts(config):
    """Run every attempt one after another and return the results in order.

    An attempt starts only once the previous one has finalized and released
    its socket.
    """
    results = []
    for seq in range(config.attempts):
        log.debug("attempt %d/%d to %s:%d", seq + 1, config.attempts, config.address, config.port)
        results.append(await run_attempt(seq, config))
    return results
