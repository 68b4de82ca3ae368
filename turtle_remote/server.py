"""The server: HTTP endpoints plus websocket listeners for viewers and turtles."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

import websockets
from aiohttp import web

from .connection_manager import ConnectionManager
from .db import Database
from .extensions import Extension
from .handshake import handle_client_connection, handle_turtle_connection

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (Extension.POSITION_TRACKING,)

CLIENT_PORT = 9001
TURTLE_PORT = 9002
HTTP_PORT = 9003


def build_http_app(db: Database, lua_dir: Optional[str] = None) -> web.Application:
    """The HTTP application listing and adding worlds and serving Lua files."""

    async def get_worlds(request: web.Request) -> web.Response:
        names = await db.world_names()
        log.info("%s", names)
        return web.json_response(names)

    async def get_supported_extensions(request: web.Request) -> web.Response:
        return web.json_response([e.string_ident() for e in SUPPORTED_EXTENSIONS])

    async def add_world(request: web.Request) -> web.Response:
        await db.add_world(await request.text())
        return web.Response()

    app = web.Application()
    app.router.add_get("/get_worlds", get_worlds)
    app.router.add_get("/get_supported_extensions", get_supported_extensions)
    app.router.add_post("/add_world", add_world)
    if lua_dir is not None and Path(lua_dir).is_dir():
        app.router.add_static("/lua", lua_dir)
    return app


async def serve(db_path: str, host: str = "0.0.0.0", lua_dir: Optional[str] = "./lua") -> None:
    """Run the HTTP server and both websocket listeners until cancelled."""
    db = await Database.connect(db_path)
    await db.create_schema()
    manager = ConnectionManager(db)
    runner = web.AppRunner(build_http_app(db, lua_dir))
    await runner.setup()

    async def client_handler(ws) -> None:
        try:
            await handle_client_connection(ws, manager)
        except Exception:
            log.exception("client connection failed")
            return
        await ws.wait_closed()

    async def turtle_handler(ws) -> None:
        try:
            registered = await handle_turtle_connection(ws, manager)
        except Exception:
            log.exception("turtle connection failed")
            return
        if registered is not None:
            await ws.wait_closed()

    try:
        await web.TCPSite(runner, host, HTTP_PORT).start()
        async with websockets.serve(client_handler, host, CLIENT_PORT):
            log.info("Client Socket Listening on: %s:%s", host, CLIENT_PORT)
            async with websockets.serve(turtle_handler, host, TURTLE_PORT):
                log.info("Turtle Socket Listening on: %s:%s", host, TURTLE_PORT)
                await manager.run()
    finally:
        manager.stop()
        await runner.cleanup()
        await db.close()


def _database_path(url: str) -> str:
    for prefix in ("sqlite://", "sqlite:"):
        if url.startswith(prefix):
            return url[len(prefix):]
    return url


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Start the server from the command line."""
    parser = argparse.ArgumentParser(prog="turtle-remote-server", description="Turtle remote-control server.")
    parser.add_argument(
        "--database",
        default=os.environ.get("DATABASE_URL"),
        help="SQLite database path or sqlite: URL (default: $DATABASE_URL)",
    )
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--lua-dir", default="./lua", help="directory served under /lua")
    args = parser.parse_args(argv)
    if not args.database:
        parser.error("no database given; set DATABASE_URL or pass --database")

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("turtle_remote").setLevel(logging.DEBUG)
    try:
        asyncio.run(serve(_database_path(args.database), args.host, args.lua_dir))
    except KeyboardInterrupt:
        pass
    return 0