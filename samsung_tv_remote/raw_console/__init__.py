# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
An interactive key code console for Samsung TVs.

Connects, waits for the TV user to authorize the console, then sends each input
line as a key code. Run with "samsung-tv-remote-console" or
"python3 -m samsung_tv_remote.raw_console".
"""
