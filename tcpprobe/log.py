# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import logging
import os

DEFAULT_LOG_LEVEL = os.getenv("TCPPROBE_LOG_LEVEL", "WARNING").upper()


def setup_logging(level=None):
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
