# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Error codes reported by the projector in failure replies.

A failure reply carries two bytes: an error category and an error detail. The
category groups errors the same way the vendor documentation does.
"""

from __future__ import annotations

from ..internal_types import *
from .constants import ResponseOrigin

UNKNOWN_ERROR = "UNKNOWN ERROR"
"""Returned by describe_error() for an unknown (category, detail) pair."""

MALFORMED_ERROR_CONTEXT = "UNKNOWN CODE - WRONG BYTE, missing 0x02"
"""Context string for a failure reply whose length marker is not 0x02."""

UNKNOWN_COMMAND_CONTEXT = "Unknown error - code not found"

COMMAND_ERRORS = 0x00
VALUE_ERRORS = 0x01
OPERATION_ERRORS = 0x02
GAIN_ERRORS = 0x03

error_catalog: Dict[int, Dict[int, str]] = {
    COMMAND_ERRORS: {
        0x00: "The command cannot be recognized.",
        0x01: "The command is not supported by the model in use.",
      },
    VALUE_ERRORS: {
        0x00: "The specified value is invalid",
        0x01: "The specified input terminal is invalid",
        0x02: "The specified language is invalid",
      },
    OPERATION_ERRORS: {
        0x00: "Memory allocation error",
        0x02: "Memory in use",
        0x03: "The specified value cannot be used",
        0x04: "Forced onscreen mute on",
        0x06: "Viewer error",
        0x07: "No signal",
        0x08: "A test pattern or filter is displayed",
        0x09: "No PC card is inserted",
        0x0A: "Memory operation error",
        0x0C: "An entry list is displayed",
        0x0D: "The command cannot be accepted because the power is off",
        0x0E: "The command execution failed",
        0x0F: "There is no authority necessary for the operation.",
      },
    GAIN_ERRORS: {
        0x00: "The specified gain number is incorrect.",
        0x01: "The specified gain is invalid",
        0x02: "Adjustment failed",
      },
  }
"""Error category -> error detail -> diagnostic string."""

def describe_error(category: int, detail: int) -> str:
    """Returns the diagnostic string for an error code pair, or UNKNOWN_ERROR."""
    details = error_catalog.get(category)
    if details is None:
        return UNKNOWN_ERROR
    return details.get(detail, UNKNOWN_ERROR)

failure_context_map: Dict[int, Tuple[str, Optional[ResponseOrigin]]] = {
    0x00: ("Power on failed", None),
    0x01: ("Power off failed", None),
    0x10: ("Picture mute on failed", ResponseOrigin.CONTROL_FAILED),
    0x11: ("Picture mute off failed", ResponseOrigin.CONTROL_FAILED),
    0x12: ("Sound mute on failed", None),
    0x13: ("Sound mute off failed", None),
    0x14: ("OnScreen mute on failed", None),
    0x15: ("OnScreen mute off failed", None),
    0x85: ("Settings request - response failed", None),
    0x98: ("Picture freeze failed", None),
  }
"""Command code -> (context string, origin the string is restricted to, if any).

Command code 0x10 means picture mute only for control (0xA2) replies; the same
code from another family must not be reported as a picture mute failure.
"""

def failure_context(origin: int, command_code: int) -> str:
    """Returns the command-specific context string for a failure reply."""
    entry = failure_context_map.get(command_code)
    if entry is None:
        return UNKNOWN_COMMAND_CONTEXT
    context, required_origin = entry
    if required_origin is not None and origin != required_origin:
        return UNKNOWN_COMMAND_CONTEXT
    return context
