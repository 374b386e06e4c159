# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV emulator.

Provides a simple emulation of a Samsung TV remote control endpoint on TCP/IP.
"""

from .emulator_impl import (
    SamsungTvEmulator,
    AuthPolicy,
    ReceivedKeyCode,
  )
