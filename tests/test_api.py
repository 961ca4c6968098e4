import pytest
from aiohttp import web

from api import RestStore, open_store
from config import Settings
from db import LocalStore, PersistenceError


def make_app(collections, status=200):
    async def get_list(request):
        if status != 200:
            return web.json_response({'message': 'boom'}, status=status)
        return web.json_response(collections.get(request.match_info['key'], []))

    async def put_list(request):
        if status != 200:
            return web.json_response({'message': 'boom'}, status=status)
        collections[request.match_info['key']] = await request.json()
        return web.json_response({'ok': True})

    app = web.Application()
    app.router.add_get('/api/{key}', get_list)
    app.router.add_put('/api/{key}', put_list)
    return app


async def test_fetch_and_replace_list(aiohttp_server):
    collections = {}
    server = await aiohttp_server(make_app(collections))
    store = RestStore(str(server.make_url('/api')))

    assert await store.fetch_list('study-sessions') == []

    rows = [{'id': 'a', 'subject': 'Math', 'date': '2026-10-19', 'duration_seconds': 125}]
    await store.replace_list('study-sessions', rows)

    assert collections['study-sessions'] == rows
    assert await store.fetch_list('study-sessions') == rows


async def test_error_status_raises(aiohttp_server):
    server = await aiohttp_server(make_app({}, status=500))
    store = RestStore(str(server.make_url('/api')))

    with pytest.raises(PersistenceError):
        await store.fetch_list('subjects')
    with pytest.raises(PersistenceError):
        await store.replace_list('subjects', [])


async def test_non_list_payload_raises(aiohttp_server):
    server = await aiohttp_server(make_app({'subjects': {'id': 'x'}}))
    store = RestStore(str(server.make_url('/api')))

    with pytest.raises(PersistenceError):
        await store.fetch_list('subjects')


def test_unreachable_backend_raises():
    store = RestStore('http://127.0.0.1:1/api', timeout=2)

    with pytest.raises(PersistenceError):
        store.load_list('subjects')


def test_base_url_required():
    with pytest.raises(ValueError):
        RestStore('')


def test_open_store_selects_backend(tmp_path):
    local = open_store(Settings(data_dir=tmp_path))
    rest = open_store(Settings(data_dir=tmp_path, storage='rest', api_url='http://localhost:5000/api'))

    assert isinstance(local, LocalStore)
    assert isinstance(rest, RestStore)
    assert rest.url_for('subjects') == 'http://localhost:5000/api/subjects'
