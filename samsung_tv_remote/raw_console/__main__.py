#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

from __future__ import annotations

import sys
import argparse
import logging
import dotenv
import colorama # type: ignore[import]
from colorama import Fore, Style
import traceback

from samsung_tv_remote.internal_types import *
from samsung_tv_remote.pkg_logging import logger
from samsung_tv_remote.exceptions import SamsungTvRemoteError
from samsung_tv_remote.client import SamsungTvClientConfig, SamsungTvSession, samsung_tv_connect
from samsung_tv_remote.protocol import AuthResult
from samsung_tv_remote.util import error_message

QUIT_COMMANDS = (":quit", ":q", "exit", "quit")

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
    _session: Optional[SamsungTvSession] = None
    _colorize_stdout: bool = True
    _client_config: Optional[SamsungTvClientConfig] = None

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def ocolor(self, codes: str) -> str:
        return codes if self._colorize_stdout else ""

    def get_client_config(self) -> SamsungTvClientConfig:
        if self._client_config is None:
            self._client_config = SamsungTvClientConfig(
                default_host=self._args.host,
                default_port=self._args.port,
                controller_name=self._args.name,
                verbose=True,
              )
        return self._client_config

    def print_error(self, msg: str) -> None:
        print(f"{self.ocolor(Fore.RED)}{msg}{self.ocolor(Style.RESET_ALL)}", file=sys.stderr)

    def handle_line(self, session: SamsungTvSession, line: str) -> bool:
        """Executes one console input line. Returns False if the console should exit."""
        line = line.strip()
        if line == "":
            return True
        if line in QUIT_COMMANDS:
            return False
        try:
            if line == ":log":
                for entry in session.get_log():
                    print(f"{self.ocolor(Fore.BLUE)}{entry}{self.ocolor(Style.RESET_ALL)}")
            elif line == ":check":
                session.check_connection()
                print(f"{self.ocolor(Fore.GREEN)}TV is responding{self.ocolor(Style.RESET_ALL)}")
            elif line.startswith("!"):
                key_code = line[1:].strip()
                session.send_key_code_async(key_code)
                print(f"{self.ocolor(Fore.GREEN)}{key_code:<20} ->{self.ocolor(Style.RESET_ALL)}")
            else:
                session.send_key_code(line)
                print(f"{self.ocolor(Fore.GREEN)}{line:<20} -> ok{self.ocolor(Style.RESET_ALL)}")
        except SamsungTvRemoteError as e:
            if self._provide_traceback:
                self.print_error(f"Error: {error_message(e)}\n{traceback.format_exc()}")
            else:
                self.print_error(f"Error: {error_message(e)}")
            if session.is_closed:
                self.print_error("Connection to TV lost")
                return False
        return True

    def handle_console_input(self, session: SamsungTvSession) -> None:
        try:
            while True:
                line = input(">>> ")
                if not self.handle_line(session, line):
                    break
        except EOFError:
            print()
        finally:
            logger.debug("Console input handler exiting")

    def cmd_bare(self) -> int:
        with samsung_tv_connect(config=self.get_client_config()) as session:
            self._session = session
            print(f"{self.ocolor(Fore.YELLOW)}Waiting for approval on the TV screen...{self.ocolor(Style.RESET_ALL)}")
            result = session.authenticate()
            if result != AuthResult.ALLOWED:
                raise CmdExitError(1, f"Authentication failed: {result.value}")
            print(f"{self.ocolor(Fore.GREEN)}Authorized. Enter key codes (e.g. KEY_VOLUP), "
                  f"'!KEY' to send without waiting, ':check', ':log' or ':quit'.{self.ocolor(Style.RESET_ALL)}")
            self.handle_console_input(session)
        return 0

    def run(self) -> int:
        """Run the key console with provided arguments

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(description="Interactively send key codes to a Samsung TV.")

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('-p', '--port', default=None, type=int,
                            help='''The port number to connect to. Default: 55000''')
        parser.add_argument('-n', '--name', default=None,
                            help='''The controller name shown on the TV.''')
        parser.add_argument('host', default=None, nargs='?',
                            help='''The LAN address of the TV. Default: use env var SAMSUNG_TV_REMOTE_HOST.''')

        try:
            args = parser.parse_args(self._argv)
        except ArgparseExitError as ex:
            return ex.exit_code
        traceback: bool = args.traceback
        self._provide_traceback = traceback
        self._colorize_stdout = sys.stdout.isatty()

        try:
            logging.basicConfig(
                level=logging.getLevelName(args.log_level.upper()),
            )
            self._args = args
            rc = self.cmd_bare()
            logging.debug(f"Command returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
            print(f"samsung-tv-remote-console: error: {error_message(ex)}", file=sys.stderr)
        except BaseException as ex:
            print(f"samsung-tv-remote-console: Unhandled exception: {ex}", file=sys.stderr)
            raise

        return rc

def run(argv: Optional[Sequence[str]]=None) -> int:
    dotenv.load_dotenv()
    colorama.just_fix_windows_console()
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
