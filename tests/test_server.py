from contextlib import asynccontextmanager

import pytest
from aiohttp import test_utils

from turtle_remote.db import Database
from turtle_remote.server import SUPPORTED_EXTENSIONS, build_http_app, main


@asynccontextmanager
async def _http(tmp_path, lua_dir=None):
    db = await Database.connect(str(tmp_path / "server.sqlite"))
    await db.create_schema()
    try:
        app = build_http_app(db, lua_dir)
        async with test_utils.TestClient(test_utils.TestServer(app)) as client:
            yield client, db
    finally:
        await db.close()


@pytest.mark.asyncio
async def test_supported_extensions_endpoint(tmp_path):
    async with _http(tmp_path) as (client, _):
        resp = await client.get("/get_supported_extensions")
        assert resp.status == 200
        assert await resp.json() == ["trc_position_tracking"]
    assert [e.string_ident() for e in SUPPORTED_EXTENSIONS] == ["trc_position_tracking"]


@pytest.mark.asyncio
async def test_worlds_start_empty(tmp_path):
    async with _http(tmp_path) as (client, _):
        resp = await client.get("/get_worlds")
        assert await resp.json() == []


@pytest.mark.asyncio
async def test_add_world_then_list(tmp_path):
    async with _http(tmp_path) as (client, db):
        resp = await client.post("/add_world", data="overworld")
        assert resp.status == 200
        resp = await client.get("/get_worlds")
        assert await resp.json() == ["overworld"]
        assert await db.world_names() == ["overworld"]


@pytest.mark.asyncio
async def test_adding_a_world_twice_keeps_one(tmp_path):
    async with _http(tmp_path) as (client, _):
        await client.post("/add_world", data="nether")
        await client.post("/add_world", data="nether")
        await client.post("/add_world", data="end")
        resp = await client.get("/get_worlds")
        assert await resp.json() == ["nether", "end"]


@pytest.mark.asyncio
async def test_lua_files_are_served(tmp_path):
    lua_dir = tmp_path / "lua"
    lua_dir.mkdir()
    (lua_dir / "startup.lua").write_text("print('hi')\n")
    async with _http(tmp_path, str(lua_dir)) as (client, _):
        resp = await client.get("/lua/startup.lua")
        assert resp.status == 200
        assert await resp.text() == "print('hi')\n"


@pytest.mark.asyncio
async def test_missing_lua_file_is_not_found(tmp_path):
    lua_dir = tmp_path / "lua"
    lua_dir.mkdir()
    async with _http(tmp_path, str(lua_dir)) as (client, _):
        resp = await client.get("/lua/absent.lua")
        assert resp.status == 404


def test_main_requires_database(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2