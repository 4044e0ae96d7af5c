# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by nec_projector"""

DEFAULT_PORT = 7142
"""The listen port number used by the projector for TCP/IP control."""

DEFAULT_TIMEOUT = 2.0
"""The default timeout for all TCP/IP control operations, in seconds."""

STABLE_POWER_TIMEOUT = 60.0
"""The timeout for the projector to finish cooling or a power on/off transition, in seconds."""

POWER_POLL_INTERVAL = 0.5
"""Seconds between running status polls while waiting for power to stabilize."""
