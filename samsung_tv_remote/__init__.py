# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Package samsung_tv_remote provides a command-line tool and API for controlling
Samsung TVs via their proprietary TCP/IP remote control protocol.
"""

from .version import __version__

from .pkg_logging import logger

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    SamsungTvRemoteError,
    TransportError,
    FramingError,
    ConnectionClosedError,
    EncodingError,
    ProtocolError,
  )

from .constants import DEFAULT_PORT, DEFAULT_TIMEOUT, AUTHENTICATE_TIMEOUT, PING_KEY_CODE

from .client import (
    SamsungTvSession,
    SessionState,
    samsung_tv_connect,
    resolve_tv_tcp_host,
    ByteChannel,
    TcpByteChannel,
    SamsungTvClientConfig,
  )

from .protocol import (
    APP_STRING,
    Message,
    AuthResult,
    encode_envelope,
    decode_message,
  )

from .util import (
    full_class_name,
    full_name_of_class,
)
