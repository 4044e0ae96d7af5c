#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol.response import DecodeResult

class NecProjectorError(Exception):
    """Base class for all error exceptions defined by this package."""
    pass

class UnknownActionError(NecProjectorError):
    """Raised when a command name is not present in the command table."""
    pass

class NecProjectorCommandError(NecProjectorError):
    """Raised by the client when a command does not produce a successful response.

    The decode result (Failed, Unrecognized or Truncated) is available as .result.
    """
    result: DecodeResult

    def __init__(self, message: str, result: DecodeResult):
        super().__init__(message)
        self.result = result
