# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Response matchers.

A matcher is chosen once per configuration and then called with the
accumulated response buffer after every inbound chunk:
- bytes / str: substring containment
- re.Pattern: search over the buffer decoded with the configured encoding
- callable: fn(buffer, config), any truthy return is a match
"""

import re

from .errors import InvocationContractError


class BytesMatcher:
    def __init__(self, needle):
        self.needle = needle

    def __call__(self, buffer, config):
        return self.needle in buffer

    def __repr__(self):
        return f"BytesMatcher({self.needle!r})"


class RegexMatcher:
    def __init__(self, pattern, encoding):
        self.pattern = pattern
        self.encoding = encoding

    def __call__(self, buffer, config):
        if isinstance(self.pattern.pattern, bytes):
            return self.pattern.search(buffer) is not None
        text = buffer.decode(self.encoding, errors="replace")
        return self.pattern.search(text) is not None

    def __repr__(self):
        return f"RegexMatcher({self.pattern.pattern!r})"


class PredicateMatcher:
    def __init__(self, fn):
        self.fn = fn

    def __call__(self, buffer, config):
        return bool(self.fn(buffer, config))

    def __repr__(self):
        return f"PredicateMatcher({self.fn!r})"


def build_matcher(match, encoding):
    if match is None:
        return None
    if isinstance(match, (BytesMatcher, RegexMatcher, PredicateMatcher)):
        return match
    if isinstance(match, str):
        match = match.encode(encoding)
    if isinstance(match, (bytes, bytearray, memoryview)):
        if not match:
            return None
        return BytesMatcher(bytes(match))
    if isinstance(match, re.Pattern):
        return RegexMatcher(match, encoding)
    if callable(match):
        return PredicateMatcher(match)
    raise InvocationContractError(f"unsupported match type: {type(match).__name__}")
