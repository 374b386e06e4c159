# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by samsung_tv_remote"""

DEFAULT_PORT = 55000
"""The listen port number used by the TV for remote control over TCP/IP."""

DEFAULT_TIMEOUT = 3.0
"""The default timeout for ordinary TCP/IP reads and writes, in seconds."""

AUTHENTICATE_TIMEOUT = 300.0
"""The read timeout while waiting for the user to accept or reject this controller
   on the TV screen, in seconds."""

CONNECT_TIMEOUT = 3.0
"""The timeout for connecting to the TV over TCP/IP, in seconds."""

DEFAULT_CONTROLLER_NAME = "samsung-tv-remote"
"""The controller name displayed on the TV if none is configured."""

PING_KEY_CODE = "PING"
"""A key code with no effect on the TV, sent to check that the connection is alive."""
