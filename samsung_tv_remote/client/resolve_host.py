# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV host/port resolver.

Turns a host specifier string plus configuration into a TCP/IP hostname and port.
"""

from __future__ import annotations

from ..internal_types import *
from ..exceptions import SamsungTvRemoteError
from .client_config import SamsungTvClientConfig

def resolve_tv_tcp_host(
        host: Optional[str]=None,
        default_port: Optional[int]=None,
        config: Optional[SamsungTvClientConfig]=None,
      ) -> HostAndPort:
    """Resolves a TV host string into a TCP/IP hostname and port.

        Args:
            host: The hostname or IPV4 address of the TV.
                    May optionally be prefixed with "tcp://".
                    May be suffixed with ":<port>" to specify a
                    non-default port, which will override the default_port argument.
                    If None, the default host in config is used.
            default_port: The default TCP/IP port number to use. If None, the port
                    will be taken from the config.

        Returns:
            A tuple of (hostname: str, port: int).
    """
    config = SamsungTvClientConfig(
        default_host=host,
        default_port=default_port,
        base_config=config
    )
    host = config.default_host
    if host is None:
        raise SamsungTvRemoteError("No TV host specified, and SAMSUNG_TV_REMOTE_HOST is not set")
    port = config.default_port

    if host.startswith('tcp://'):
        host = host[6:]
    if '/' in host or host == '':
        raise SamsungTvRemoteError(f"Invalid host specifier for TCP transport: '{config.default_host}'")
    if host.startswith('['):
        # bracketed IPv6 literal, optionally followed by ":<port>"
        end = host.find(']')
        if end < 0:
            raise SamsungTvRemoteError(f"Invalid host specifier for TCP transport: '{config.default_host}'")
        port_str = host[end + 1:]
        host = host[1:end]
        if port_str != '':
            if not port_str.startswith(':'):
                raise SamsungTvRemoteError(f"Invalid host specifier for TCP transport: '{config.default_host}'")
            port = _parse_port(port_str[1:])
    elif host.count(':') == 1:
        host, port_str = host.rsplit(':', 1)
        port = _parse_port(port_str)

    return (host, port)

def _parse_port(port_str: str) -> int:
    try:
        port = int(port_str)
    except ValueError as e:
        raise SamsungTvRemoteError(f"Invalid TCP port: '{port_str}'") from e
    if not 0 < port < 65536:
        raise SamsungTvRemoteError(f"TCP port out of range: {port}")
    return port
