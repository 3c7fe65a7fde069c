# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

import time


def now():
    return time.perf_counter()


def elapsed_ms(start):
    return (time.perf_counter() - start) * 1000.0


def seconds(ms):
    return ms / 1000.0
