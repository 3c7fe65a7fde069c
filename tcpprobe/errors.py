# MIT License
# Copyright (c) 2026 Franz Granlund
# See LICENSE file in the project root for full license information.

"""Probe errors.

Every attempt-scoped failure is a ProbeError stored on the attempt's result.
InvocationContractError is the only one raised to the caller.
"""


class ProbeError(Exception):
    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class ConnectError(ProbeError):
    pass


class ConnectTimeout(ProbeError):
    pass


class ResponseTimeout(ProbeError):
    pass


class SocketTimeout(ProbeError):
    pass


class MaxResponseBytesExceeded(ProbeError):
    pass


class TransportError(ProbeError):
    pass


class InvocationContractError(ValueError):
    pass
