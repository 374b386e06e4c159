# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV simple client connection API.
"""

from __future__ import annotations

from ..internal_types import *
from .client_config import SamsungTvClientConfig
from .session import SamsungTvSession

def samsung_tv_connect(
        host: Optional[str]=None,
        port: Optional[int]=None,
        *,
        config: Optional[SamsungTvClientConfig]=None,
        verbose: Optional[bool]=None,
      ) -> SamsungTvSession:
    """Connect to a Samsung TV and return a session, ready for authenticate().

    Args:
        host: The hostname or IPV4 address of the TV.
                may optionally be prefixed with "tcp://".
                May be suffixed with ":<port>" to specify a
                non-default port, which will override the port argument.
                If None, the host will be taken from the config, or the
                SAMSUNG_TV_REMOTE_HOST environment variable.
        port: The default port. If None, taken from the config.
        config: A SamsungTvClientConfig object that specifies
                the default host, port, timeouts, etc. to use.
                If None, a default config will be created.
        verbose: If True, the session keeps a diagnostic log.
    """
    return SamsungTvSession.connect(host, port, config=config, verbose=verbose)
