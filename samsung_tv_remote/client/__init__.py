# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV remote control client.

Provides the byte channel to the TV and the remote control session that runs on it.
"""

from .client_config import SamsungTvClientConfig
from .resolve_host import resolve_tv_tcp_host
from .channel import ByteChannel
from .tcp_channel import TcpByteChannel
from .session import SamsungTvSession, SessionState
from .simple import samsung_tv_connect
