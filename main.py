# -*- coding: utf-8 -*-
"""
五子棋 - 命令行终端版
主程序入口

使用方法:
    python main.py --origin http://localhost:8080

依赖:
    - websockets
    - pydantic
    - rich
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import dataclasses
import logging
import sys
from collections.abc import Awaitable, Callable

from rich.console import Console

from game.config import ClientConfig, get_config
from i18n import set_locale, t
from logging_config import setup_logging
from net.client import GomokuClient
from ui.rich_ui import RichBoardRenderer, RichNotifier, RichView

logger = logging.getLogger(__name__)

Command = Callable[[list[str]], Awaitable[bool]]


class GomokuCLI:
    """
    交互式命令行
    负责读取命令并转交给 GomokuClient，界面刷新由 RichView 订阅视图事件完成
    """

    def __init__(self, client: GomokuClient, console: Console | None = None,
                 renderer: RichBoardRenderer | None = None):
        self.client = client
        self.console = console or Console(highlight=False)
        self.renderer = renderer or RichBoardRenderer()
        self.is_running = True
        self._commands: dict[str, tuple[Command, str]] = {
            "login": (self._login, "login <username> <password>"),
            "register": (self._register, "register <username> <password>"),
            "logout": (lambda args: client.logout(), "logout"),
            "rooms": (lambda args: client.refresh_rooms(), "rooms"),
            "create": (self._create, "create [name]"),
            "join": (self._join, "join <room_id>"),
            "leave": (lambda args: client.leave_room(), "leave"),
            "move": (self._move, "move <x> <y>"),
            "forfeit": (lambda args: client.forfeit(), "forfeit"),
            "lobby": (lambda args: client.back_to_lobby(), "lobby"),
            "rank": (lambda args: client.request_leaderboard(), "rank"),
        }

    async def handle(self, line: str) -> bool:
        """执行一行命令；返回 False 表示退出"""
        parts = line.split()
        if not parts:
            return True
        cmd, args = parts[0].lower(), parts[1:]

        if cmd in ("quit", "exit"):
            return False
        if cmd == "help":
            self.console.print(t("cli.help"))
            return True

        entry = self._commands.get(cmd)
        if entry is None:
            self.console.print(t("cli.unknown", cmd=cmd), style="yellow")
            return True

        command, usage = entry
        try:
            await command(args)
        except _UsageError:
            self.console.print(t("cli.usage", usage=usage), style="yellow")
        return True

    # ==================== 命令 ====================

    async def _login(self, args: list[str]) -> bool:
        if len(args) != 2:
            raise _UsageError
        return await self.client.login(args[0], args[1])

    async def _register(self, args: list[str]) -> bool:
        if len(args) != 2:
            raise _UsageError
        return await self.client.register(args[0], args[1])

    async def _create(self, args: list[str]) -> bool:
        return await self.client.create_room(" ".join(args) if args else None)

    async def _join(self, args: list[str]) -> bool:
        if len(args) != 1:
            raise _UsageError
        room_id: int | str = int(args[0]) if args[0].isdigit() else args[0]
        return await self.client.join_room(room_id)

    async def _move(self, args: list[str]) -> bool:
        coords = self.renderer.on_click(" ".join(args))
        if coords is None:
            raise _UsageError
        return await self.client.submit_move(*coords)

    # ==================== 主循环 ====================

    async def run(self) -> None:
        """同时运行连接循环与命令读取"""
        client_task = asyncio.create_task(self.client.run())
        self.console.print(t("cli.help"), style="dim")
        try:
            while self.is_running:
                # 在线程中读取输入，事件循环继续收发消息
                line = await asyncio.to_thread(self.console.input, t("cli.prompt"))
                self.is_running = await self.handle(line)
        except (EOFError, KeyboardInterrupt):
            pass
        finally:
            await self.client.close()
            client_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await client_task
            self.console.print(t("cli.bye"))


class _UsageError(Exception):
    """命令参数不符合用法"""


def build_config(args: argparse.Namespace) -> ClientConfig:
    """命令行参数覆盖环境变量配置"""
    overrides = {
        key: value
        for key, value in (
            ("origin", args.origin),
            ("locale", args.locale),
            ("log_level", args.log_level),
            ("token_file", args.token_file),
        )
        if value is not None
    }
    return dataclasses.replace(get_config(), **overrides)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="五子棋客户端")
    parser.add_argument("--origin", default=None, help="服务端页面来源，如 https://example.com")
    parser.add_argument("--server", default=None, help="直接指定 WebSocket 地址 (覆盖 --origin)")
    parser.add_argument("--locale", default=None, choices=["zh_CN", "en_US"], help="界面语言")
    parser.add_argument("--log-level", default=None, help="日志级别")
    parser.add_argument("--token-file", default=None, help="令牌保存位置")
    parser.add_argument("--console-log", action="store_true", help="同时输出日志到终端")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """程序入口"""
    args = parse_args(argv)
    config = build_config(args)

    errors = config.validate()
    if errors:
        for error in errors:
            print(error, file=sys.stderr)
        sys.exit(2)

    setup_logging(
        level="DEBUG" if config.debug_mode else config.log_level,
        enable_console=args.console_log or config.debug_mode,
    )
    set_locale(config.locale)

    console = Console(highlight=False)
    client = GomokuClient(RichNotifier(console), url=args.server, config=config)
    view = RichView(client.ctx, client.game, console)
    view.attach(client.bus)
    cli = GomokuCLI(client, console, view.renderer)

    try:
        asyncio.run(cli.run())
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt - exiting")
        sys.exit(0)
    except Exception:
        logger.exception("Unhandled exception")
        raise


if __name__ == "__main__":
    main()
