# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
NEC Projector emulator.

Provides a simple emulation of an NEC projector on TCP/IP.
"""

from .emulator_impl import (
    NecProjectorEmulator,
    NecProjectorEmulatorSession,
  )
