## begin license ##
#
# "Metastreams Cookies" keeps cookie reads consistent with the cookies
# already queued on the response of the same request.
#
# Copyright (C) 2026 Seecr (Seek You Too B.V.) https://seecr.nl
#
# This file is part of "Metastreams Cookies"
#
# "Metastreams Cookies" is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# "Metastreams Cookies" is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with "Metastreams Cookies"; if not, write to the Free Software
# Foundation, Inc., 51 Franklin St, Fifth Floor, Boston, MA  02110-1301  USA
#
## end license ##

from aiohttp import web as aiohttp_web

from .context import cookie_context_middleware
from .example import index_handler

import logging
logger = logging.getLogger(__name__)

__all__ = ['create_server_app', 'create_server']


def create_server_app(path="/", additional_routes=None):
    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    routes = list(additional_routes or [])
    routes.append(aiohttp_web.get(path, index_handler))
    app.add_routes(routes)
    return app


async def create_server(port, host=None, **kwargs):
    app = create_server_app(**kwargs)

    runner = aiohttp_web.AppRunner(app)
    await runner.setup()
    site = aiohttp_web.TCPSite(runner, host=host, port=port)
    await site.start()
    logger.info(f"Serving on {site.name}")
    return runner


import autotest
test = autotest.get_tester(__name__)

from aiohttp import DummyCookieJar
from aiohttp.test_utils import TestClient, TestServer
from .context import current_context


@test
def test_additional_routes():
    app = create_server_app()
    test.eq(2, len(app.router.routes())) # GET and HEAD

    app = create_server_app(additional_routes=[aiohttp_web.post("/test", lambda r: None)])
    test.eq(3, len(app.router.routes()))

@test
async def test_example_path():
    async with TestClient(TestServer(create_server_app(path="/example")), cookie_jar=DummyCookieJar()) as client:
        response = await client.get('/example')
        test.eq(200, response.status)
        test.contains(await response.text(), '<dd id="good">ABCD</dd>')

        response = await client.get('/')
        test.eq(404, response.status)

@test
async def test_additional_routes_get_cookie_context():
    async def handler(request):
        return aiohttp_web.Response(text=str(current_context() is not None))

    app = create_server_app(additional_routes=[aiohttp_web.get("/other", handler)])
    async with TestClient(TestServer(app)) as client:
        response = await client.get('/other')
        test.eq("True", await response.text())

@test
async def test_create_server():
    runner = await create_server(0, host="127.0.0.1")
    try:
        test.eq(1, len(runner.sites))
    finally:
        await runner.cleanup()
