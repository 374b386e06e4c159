# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Samsung TV remote client configuration.

Provides a general config object for a SamsungTvSession.
"""

from __future__ import annotations

import os
import json

from ..internal_types import *
from ..exceptions import SamsungTvRemoteError
from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_PORT,
    AUTHENTICATE_TIMEOUT,
    CONNECT_TIMEOUT,
    DEFAULT_CONTROLLER_NAME,
  )

class SamsungTvClientConfig:
    """Samsung TV remote client configuration."""
    default_host: Optional[str]
    default_port: int
    timeout_secs: float
    auth_timeout_secs: float
    connect_timeout_secs: float
    controller_name: str
    controller_id: Optional[str]
    verbose: bool

    def __init__(
            self,
            default_host: Optional[str]=None,
            *,
            default_port: Optional[int]=None,
            timeout_secs: Optional[float]=None,
            auth_timeout_secs: Optional[float]=None,
            connect_timeout_secs: Optional[float]=None,
            controller_name: Optional[str]=None,
            controller_id: Optional[str]=None,
            verbose: Optional[bool]=None,
            base_config: Optional[SamsungTvClientConfig]=None,
            use_config_file: bool=True,
          ) -> None:
        """Creates a configuration for a Samsung TV remote client.

           Args:
             default_host: The default hostname or IPV4 address of the TV.
                   May optionally be prefixed with "tcp://".
                   May be suffixed with ":<port>" to specify a
                   non-default port, which will override the default_port argument.
                   If None, the default host will be taken from the
                   SAMSUNG_TV_REMOTE_HOST environment variable.
             default_port: The default TCP/IP port number to use.
                   If None, the port will be taken from SAMSUNG_TV_REMOTE_PORT.
                   If that environment variable is not found, the standard
                   port (55000) will be used.
             timeout_secs:
                   The timeout for ordinary reads and writes, in seconds.
             auth_timeout_secs:
                   The read timeout while waiting for the TV user to accept
                   or reject this controller, in seconds.
             connect_timeout_secs:
                   The timeout for establishing the TCP connection, in seconds.
             controller_name:
                   The name for this controller displayed on the TV. If None,
                   taken from SAMSUNG_TV_REMOTE_NAME, or a built-in default.
             controller_id:
                   The ID the TV uses internally to distinguish controllers.
                   If None, taken from SAMSUNG_TV_REMOTE_ID; if that is not
                   set, the local IP address of the connection is used.
             verbose:
                   If True, sessions keep an in-memory diagnostic log.
             base_config:
                   An optional base configuration to use.
        """
        if base_config is None:
            self.init_from_defaults(use_config_file=use_config_file)
        else:
            self.init_from_base_config(base_config)

        if default_host is not None and default_host != '':
            self.default_host = default_host

        if default_port is not None and default_port > 0:
            self.default_port = default_port

        if timeout_secs is not None:
            self.timeout_secs = timeout_secs

        if auth_timeout_secs is not None:
            self.auth_timeout_secs = auth_timeout_secs

        if connect_timeout_secs is not None:
            self.connect_timeout_secs = connect_timeout_secs

        if controller_name is not None and controller_name != '':
            self.controller_name = controller_name

        if controller_id is not None and controller_id != '':
            self.controller_id = controller_id

        if verbose is not None:
            self.verbose = verbose

    def init_from_defaults(self, use_config_file: bool=True) -> None:
        """Initializes the configuration from defaults, the config file and the environment."""
        self.default_host = None
        self.default_port = DEFAULT_PORT
        self.timeout_secs = DEFAULT_TIMEOUT
        self.auth_timeout_secs = AUTHENTICATE_TIMEOUT
        self.connect_timeout_secs = CONNECT_TIMEOUT
        self.controller_name = DEFAULT_CONTROLLER_NAME
        self.controller_id = None
        self.verbose = False

        if use_config_file:
            config_file = os.environ.get('SAMSUNG_TV_REMOTE_CONFIG_FILE')
            if config_file is not None and config_file != '':
                with open(config_file, 'r') as f:
                    config_jsonable = json.load(f)
                self.update_from_jsonable(config_jsonable)

        default_host = os.environ.get('SAMSUNG_TV_REMOTE_HOST')
        if default_host is not None and default_host != '':
            self.default_host = default_host
        default_port_str = os.environ.get('SAMSUNG_TV_REMOTE_PORT')
        if default_port_str is not None and default_port_str != '':
            try:
                self.default_port = int(default_port_str)
            except ValueError as e:
                raise SamsungTvRemoteError(f"Invalid SAMSUNG_TV_REMOTE_PORT: {default_port_str!r}") from e
        controller_name = os.environ.get('SAMSUNG_TV_REMOTE_NAME')
        if controller_name is not None and controller_name != '':
            self.controller_name = controller_name
        controller_id = os.environ.get('SAMSUNG_TV_REMOTE_ID')
        if controller_id is not None and controller_id != '':
            self.controller_id = controller_id

    def init_from_base_config(self, base_config: SamsungTvClientConfig) -> None:
        """Initializes the configuration from a base configuration."""
        self.default_host = base_config.default_host
        self.default_port = base_config.default_port
        self.timeout_secs = base_config.timeout_secs
        self.auth_timeout_secs = base_config.auth_timeout_secs
        self.connect_timeout_secs = base_config.connect_timeout_secs
        self.controller_name = base_config.controller_name
        self.controller_id = base_config.controller_id
        self.verbose = base_config.verbose

    def to_jsonable(self) -> JsonableDict:
        """Returns a JSON-serializable representation of the configuration."""
        result: JsonableDict = dict(
            default_host=self.default_host,
            default_port=self.default_port,
            timeout_secs=self.timeout_secs,
            auth_timeout_secs=self.auth_timeout_secs,
            connect_timeout_secs=self.connect_timeout_secs,
            controller_name=self.controller_name,
            verbose=self.verbose,
          )
        if self.controller_id is not None:
            result['controller_id'] = self.controller_id
        return result

    def to_json(self) -> str:
        """Returns a JSON representation of the configuration."""
        return json.dumps(self.to_jsonable())

    def update_from_jsonable(self, jsonable: JsonableDict) -> None:
        """Updates the configuration from a JSON-serializable representation."""
        default_host = jsonable.get('default_host')
        if default_host is not None and default_host != '':
            self.default_host = str(default_host)
        default_port = jsonable.get('default_port')
        if default_port is not None and default_port != '':
            self.default_port = int(cast(Union[int, str], default_port))
        timeout_secs = jsonable.get('timeout_secs')
        if timeout_secs is not None and timeout_secs != '':
            self.timeout_secs = float(cast(Union[float, str], timeout_secs))
        auth_timeout_secs = jsonable.get('auth_timeout_secs')
        if auth_timeout_secs is not None and auth_timeout_secs != '':
            self.auth_timeout_secs = float(cast(Union[float, str], auth_timeout_secs))
        connect_timeout_secs = jsonable.get('connect_timeout_secs')
        if connect_timeout_secs is not None and connect_timeout_secs != '':
            self.connect_timeout_secs = float(cast(Union[float, str], connect_timeout_secs))
        controller_name = jsonable.get('controller_name')
        if controller_name is not None and controller_name != '':
            self.controller_name = str(controller_name)
        controller_id = jsonable.get('controller_id')
        if controller_id is not None and controller_id != '':
            self.controller_id = str(controller_id)
        verbose = jsonable.get('verbose')
        if verbose is not None and verbose != '':
            self.verbose = bool(verbose)

    @classmethod
    def from_jsonable(cls, jsonable: JsonableDict, use_config_file: bool=True) -> 'SamsungTvClientConfig':
        """Creates a configuration from a JSON-serializable representation."""
        result = cls(use_config_file=use_config_file)
        result.update_from_jsonable(jsonable)
        return result

    @classmethod
    def from_json(cls, json_str: str, use_config_file: bool=True) -> 'SamsungTvClientConfig':
        """Creates a configuration from a JSON representation."""
        jsonable = json.loads(json_str)
        return cls.from_jsonable(jsonable, use_config_file=use_config_file)

    @classmethod
    def from_config_file(cls, filename: str) -> 'SamsungTvClientConfig':
        """Creates a configuration from a JSON-serialized config file."""
        with open(filename, 'r') as f:
            jsonable: JsonableDict = json.load(f)

        result = cls.from_jsonable(jsonable, use_config_file=False)
        return result

    def __str__(self) -> str:
        return (
            f"SamsungTvClientConfig("
            f"default_host={self.default_host}, "
            f"default_port={self.default_port}, "
            f"timeout_secs={self.timeout_secs!r}, "
            f"auth_timeout_secs={self.auth_timeout_secs!r})"
          )

    def __repr__(self) -> str:
        return str(self)
