#!/usr/bin/env python3

# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Command-line tool for discovering and controlling Roku devices."""

from __future__ import annotations

import sys
import argparse
import json
import asyncio
import logging

from roku_client.internal_types import *

from roku_client import (
    __version__ as pkg_version,
    RokuClient,
    RokuClientConfig,
    RokuDiscoverer,
    lookup_key,
  )

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
    _config: RokuClientConfig
    _provide_traceback: bool = True

    def __init__(self, argv: Optional[Sequence[str]]=None):
        self._argv = argv

    def _print_json(self, data: Jsonable) -> None:
        print(json.dumps(data, indent=2, sort_keys=True))

    async def _connect(self) -> RokuClient:
        host = self._config.default_host
        if host is None:
            address = await RokuDiscoverer().discover_one(self._config.discovery_timeout_secs)
            logging.debug(f"Using discovered device {address}")
            host = address
        return RokuClient(host, timeout_secs=self._config.timeout_secs)

    async def cmd_bare(self) -> int:
        print("A command is required", file=sys.stderr)
        return 1

    async def cmd_discover(self) -> int:
        discoverer = RokuDiscoverer()
        wait_time: float = self._config.discovery_timeout_secs
        if self._args.all:
            self._print_json(list(await discoverer.discover_all(wait_time)))
        else:
            print(await discoverer.discover_one(wait_time))
        return 0

    async def cmd_apps(self) -> int:
        async with await self._connect() as client:
            apps = await client.apps()
        self._print_json([ app._asdict() for app in apps ])
        return 0

    async def cmd_active(self) -> int:
        async with await self._connect() as client:
            app = await client.active_app()
        self._print_json(None if app is None else app._asdict())
        return 0

    async def cmd_info(self) -> int:
        async with await self._connect() as client:
            info = await client.info()
        self._print_json(cast(JsonableDict, info))
        return 0

    async def cmd_icon(self) -> int:
        app_id: str = self._args.app_id
        output: Optional[str] = self._args.output
        async with await self._connect() as client:
            icon = await client.icon(app_id)
            data = await icon.read()
        if output is None:
            output = f"{app_id}{icon.extension or ''}"
        with open(output, 'wb') as f:
            f.write(data)
        print(output)
        return 0

    async def cmd_launch(self) -> int:
        async with await self._connect() as client:
            await client.launch(self._args.app_id)
        return 0

    async def cmd_dtv(self) -> int:
        async with await self._connect() as client:
            await client.launch_dtv(self._args.channel)
        return 0

    async def cmd_key(self) -> int:
        verb: str = self._args.verb
        async with await self._connect() as client:
            for key_name in self._args.keys:
                key = lookup_key(key_name)
                if verb == 'keydown':
                    await client.keydown(key)
                elif verb == 'keyup':
                    await client.keyup(key)
                else:
                    await client.keypress(key)
        return 0

    async def cmd_text(self) -> int:
        async with await self._connect() as client:
            await client.text(self._args.text)
        return 0

    async def cmd_version(self) -> int:
        print(pkg_version)
        return 0

    async def arun(self) -> int:
        """Run the roku command-line tool with provided arguments

        Args:
            argv (Optional[Sequence[str]], optional):
                A list of commandline arguments (NOT including the program as argv[0]!),
                or None to use sys.argv[1:]. Defaults to None.

        Returns:
            int: The exit code that would be returned if this were run as a standalone command.
        """
        parser = NoExitArgumentParser(prog='roku', description="Discover and control Roku devices.")

        # ======================= Main command

        self._parser = parser
        parser.add_argument('--traceback', "--tb", action='store_true', default=False,
                            help='Display detailed exception information')
        parser.add_argument('--log-level', dest='log_level', default='warning',
                            choices=['debug', 'info', 'warning', 'error', 'critical'],
                            help='''The logging level to use. Default: warning''')
        parser.add_argument('--host', default=None,
                            help='''The device address ("host", "host:port" or "http://host:port"). '''
                                 '''Default: $ROKU_CLIENT_HOST, or the first device found by discovery''')
        parser.add_argument('--timeout', type=float, default=None,
                            help='''The timeout for each request, in seconds. Default: $ROKU_CLIENT_TIMEOUT or 10''')
        parser.add_argument('--wait-time', dest='wait_time', type=float, default=None,
                            help='''The amount of time to wait for discovery responses, in seconds. '''
                                 '''Default: $ROKU_CLIENT_DISCOVERY_TIMEOUT or 10''')
        parser.set_defaults(func=self.cmd_bare)

        subparsers = parser.add_subparsers(
                            title='Commands',
                            description='Valid commands',
                            help='Additional help available with "<command-name> -h"')

        # ======================= discover

        parser_discover = subparsers.add_parser('discover', description="Find Roku devices on the local network")
        parser_discover.add_argument('--all', action='store_true', default=False,
                            help='Wait the full time and list every device, as JSON. Default: print the first device found')
        parser_discover.set_defaults(func=self.cmd_discover)

        # ======================= queries

        parser_apps = subparsers.add_parser('apps', description="List installed apps")
        parser_apps.set_defaults(func=self.cmd_apps)

        parser_active = subparsers.add_parser('active', description="Show the active app")
        parser_active.set_defaults(func=self.cmd_active)

        parser_info = subparsers.add_parser('info', description="Show device info")
        parser_info.set_defaults(func=self.cmd_info)

        parser_icon = subparsers.add_parser('icon', description="Save an app icon to a file")
        parser_icon.add_argument('app_id', help='The app id')
        parser_icon.add_argument('-o', '--output', default=None,
                            help='The output file. Default: <app-id><extension>')
        parser_icon.set_defaults(func=self.cmd_icon)

        # ======================= launch

        parser_launch = subparsers.add_parser('launch', description="Launch an app")
        parser_launch.add_argument('app_id', help='The app id')
        parser_launch.set_defaults(func=self.cmd_launch)

        parser_dtv = subparsers.add_parser('dtv', description="Launch the DTV tuner")
        parser_dtv.add_argument('channel', nargs='?', default=None, help='The channel. Default: last channel')
        parser_dtv.set_defaults(func=self.cmd_dtv)

        # ======================= keys

        for verb in ('keypress', 'keydown', 'keyup'):
            parser_key = subparsers.add_parser(verb, description=f"Send {verb} events, in order")
            parser_key.add_argument('keys', nargs='+', metavar='KEY',
                                help='A key name (e.g., home, volume_up, VolumeUp) or a single character')
            parser_key.set_defaults(func=self.cmd_key, verb=verb)

        parser_text = subparsers.add_parser('text', description="Type a string")
        parser_text.add_argument('text', help='The text to type')
        parser_text.set_defaults(func=self.cmd_text)

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
            self._config = RokuClientConfig(
                default_host=args.host,
                timeout_secs=args.timeout,
                discovery_timeout_secs=args.wait_time,
              )
            func: Callable[[], Awaitable[int]] = args.func
            logging.debug(f"Running command {func.__name__}, tb = {traceback}")
            rc = await func()
            logging.debug(f"Command {func.__name__} returned {rc}")
        except Exception as ex:
            if isinstance(ex, CmdExitError):
                rc = ex.exit_code
            else:
                rc = 1
            if rc != 0:
                if traceback:
                    raise
                print(f"roku: error: {ex}", file=sys.stderr)

        return rc

    def run(self) -> int:
        return asyncio.run(self.arun())

def run(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = CommandHandler(argv).run()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

async def arun(argv: Optional[Sequence[str]]=None) -> int:
    try:
        rc = await CommandHandler(argv).arun()
    except CmdExitError as ex:
        rc = ex.exit_code
    return rc

# allow running with "python3 -m", or as a standalone script
if __name__ == "__main__":
    sys.exit(run())
