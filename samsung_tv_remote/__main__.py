#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging
from signal import SIGINT, SIGTERM

import dotenv

from samsung_tv_remote.internal_types import *
from samsung_tv_remote import (
    __version__ as pkg_version,
    DEFAULT_PORT,
    AuthResult,
    SamsungTvSession,
    SamsungTvClientConfig,
    samsung_tv_connect,
    full_class_name,
  )
from samsung_tv_remote.util import error_message

class CmdExitError(RuntimeError):
    exit_code: int

    def __init__(self, exit_code: int, msg: Optional[str]=None):
        if msg is None:
            msg = f"Command exited with return code {exit_code}"
        super().__init__(msg)
        self.exit_code = exit_code

class ArgparseExitError(CmdExitError):
    pass

class NoExitArgumentParser(argparse.ArgumentParser):
    def exit(self, status=0, message=None):
        if message:
            self._print_message(message, sys.stderr)
        raise ArgparseExitError(status, message)

class CommandHandler:
    _argv: Optional[Sequence[str]]
    _parser: argparse.ArgumentParser
    _args: argparse.Namespace
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def get_client_config(self) -> SamsungTvClientConfig:
        return SamsungTvClientConfig(
            default_host=self._args.host,
            default_port=self._args.port,
            verbose=self._args.verbose,
          )

    def connect(self) -> SamsungTvSession:
        return samsung_tv_connect(config=self.get_client_config())

    def authenticate(self, session: SamsungTvSession) -> AuthResult:
        return session.authenticate(
            name=self._args.name,
            controller_id=self._args.controller_id,
            ip=self._args.ip,
          )

    def print_log(self, session: SamsungTvSession) -> None:
        if self._args.verbose:
            for line in session.get_log():
                print(line, file=sys.stderr)

    def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    def cmd_authenticate(self) -> int:
        with self.connect() as session:
            try:
                result = self.authenticate(session)
            finally:
                self.print_log(session)
        print(json.dumps(dict(result=result.value), indent=2))
        return 0 if result == AuthResult.ALLOWED else 1

    def cmd_send(self) -> int:
        continue_on_error: bool = self._args.continue_on_error
        no_wait: bool = self._args.no_wait
        key_codes: List[str] = self._args.key_codes
        if len(key_codes) == 0:
            raise CmdExitError(1, "No key codes specified")
        response_datas: List[JsonableDict] = []
        try:
            with self.connect() as session:
                try:
                    if not self._args.no_auth:
                        result = self.authenticate(session)
                        if result != AuthResult.ALLOWED:
                            raise CmdExitError(1, f"Authentication failed: {result.value}")
                    for key_code in key_codes:
                        response_data: JsonableDict = dict(key_code=key_code)
                        try:
                            if no_wait:
                                session.send_key_code_async(key_code)
                            else:
                                session.send_key_code(key_code)
                        except Exception as exc:
                            response_data.update(
                                error=full_class_name(exc),
                                error_message=error_message(exc),
                              )
                            response_datas.append(response_data)
                            if not continue_on_error or session.is_closed:
                                raise
                        else:
                            response_datas.append(response_data)
                finally:
                    self.print_log(session)
        finally:
            print(json.dumps(response_datas, indent=2))
        return 0

    def cmd_check(self) -> int:
        with self.connect() as session:
            try:
                result = self.authenticate(session)
                if result != AuthResult.ALLOWED:
                    raise CmdExitError(1, f"Authentication failed: {result.value}")
                session.check_connection()
            finally:
                self.print_log(session)
        print(json.dumps(dict(status="OK"), indent=2))
        return 0

    def cmd_emulator(self) -> int:
        from samsung_tv_remote.emulator import SamsungTvEmulator
        return asyncio.run(self._run_emulator(SamsungTvEmulator))

    async def _run_emulator(self, emulator_class: Callable[..., Any]) -> int:
        emulator = emulator_class(
            policy=self._args.policy,
            bind_addr=self._args.bind,
            port=self._args.port,
            transient_notices=self._args.notices,
            approval_delay=self._args.approval_delay,
          )
        loop = asyncio.get_running_loop()
        for signal in (SIGINT, SIGTERM):
            loop.add_signal_handler(signal, emulator.close)
        try:
            await emulator.run()
        finally:
            for signal in (SIGINT, SIGTERM):
                loop.remove_signal_handler(signal)
        return 0

    def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    def add_connect_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('--host', default=None,
                            help='''The TV host address. Default: use env var SAMSUNG_TV_REMOTE_HOST.''')
        parser.add_argument("--port", default=None, type=int,
            help=f"TV port number to connect to. Default: {DEFAULT_PORT}")

    def add_auth_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument('-n', '--name', default=None,
                            help='''The controller name shown on the TV. Default: use env var SAMSUNG_TV_REMOTE_NAME.''')
        parser.add_argument('--id', dest='controller_id', default=None,
                            help='''The controller ID. Default: the local IP address.''')
        parser.add_argument('--ip', default=None,
                            help='''The controller IP address reported to the TV. Default: the local IP address.''')

    def run(self) -> int:
        """Run the samsung-tv-remote command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Control a Samsung TV.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('-v', '--verbose', action='store_true', default=False,
                            help='Print the session diagnostic log to stderr')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= authenticate

        parser_auth = subparsers.add_parser('authenticate',
                            description="Ask the TV to accept this controller, and wait for the answer.")
        self.add_connect_args(parser_auth)
        self.add_auth_args(parser_auth)
        parser_auth.set_defaults(func=self.cmd_authenticate)

        # ======================= send

        parser_send = subparsers.add_parser('send', description="Send one or more key codes to the TV.")
        self.add_connect_args(parser_send)
        self.add_auth_args(parser_send)
        parser_send.add_argument('--no-wait', dest="no_wait", action='store_true', default=False,
                            help='Do not wait for the TV to confirm each key code. Default: False')
        parser_send.add_argument('--no-auth', dest="no_auth", action='store_true', default=False,
                            help='Send key codes without authenticating first. Default: False')
        parser_send.add_argument('--continue', dest="continue_on_error", action='store_true', default=False,
                            help='Continue sending key codes on error. Default: False')
        parser_send.add_argument('key_codes', nargs='*',
                            help='''One or more key codes to send; e.g., "KEY_VOLUP".''')
        parser_send.set_defaults(func=self.cmd_send)

        # ======================= check

        parser_check = subparsers.add_parser('check', description="Authenticate, then check that the TV responds.")
        self.add_connect_args(parser_check)
        self.add_auth_args(parser_check)
        parser_check.set_defaults(func=self.cmd_check)

        # ======================= emulator

        parser_emulator = subparsers.add_parser('emulator', description="Run a TV emulator for testing purposes.")
        parser_emulator.add_argument("--port", default=DEFAULT_PORT, type=int,
            help=f"Port number to listen on. Default: {DEFAULT_PORT}")
        parser_emulator.add_argument('-b', '--bind', default="0.0.0.0",
                            help='''The local unicast IP address to bind to. Default: 0.0.0.0.''')
        parser_emulator.add_argument('--policy', default='allow',
                            choices=['allow', 'deny', 'timeout', 'ignore'],
                            help='''The answer to authentication requests. Default: allow''')
        parser_emulator.add_argument('--notices', default=1, type=int,
                            help='''Transient notices sent before each authentication result. Default: 1''')
        parser_emulator.add_argument('--approval-delay', dest='approval_delay', default=0.0, type=float,
                            help='''Seconds to wait before answering authentication requests. Default: 0''')
        parser_emulator.set_defaults(func=self.cmd_emulator)

        # ======================= version

        parser_version = subparsers.add_parser('version',
                                description='''Display version information.''')
        parser_version.set_defaults(func=self.cmd_version)

        # =========================================================

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            func: Callable[[], int] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"samsung-tv-remote: error: {error_message(ex)}", file=sys.stderr)
        except BaseException as ex:
            print(f"samsung-tv-remote: Unhandled exception {ex.__class__.__name__}: {ex}", file=sys.stderr)
            raise

        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    dotenv.load_dotenv()
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
