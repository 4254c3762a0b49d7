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

from contextvars import ContextVar
from types import MappingProxyType

from aiohttp import web as aiohttp_web

from .cookie import Cookie
from .errors import InvalidArgument

import logging
logger = logging.getLogger(__name__)

__all__ = ['CookieContext', 'current_context', 'context_from_request', 'cookie_context_middleware', 'CONTEXT_KEY']

CONTEXT_KEY = 'metastreams.cookies.context'

_current_context = ContextVar('metastreams_cookies_context', default=None)


class CookieContext:
    """The cookies of one request: those sent by the client (incoming) and
    those queued for the response (outgoing).

    Queuing a cookie also adds it to the incoming cookies when the client
    did not send one by that name. An incoming cookie is never overwritten,
    so after a write the incoming value may be stale.
    """

    def __init__(self, request):
        if request is None:
            raise InvalidArgument("Argument request cannot be None!")
        self._request = request
        self._incoming = {name: Cookie(name, value) for name, value in request.cookies.items()}
        self._outgoing = {}

    @property
    def request(self):
        return self._request

    @property
    def incoming(self):
        return MappingProxyType(self._incoming)

    @property
    def outgoing(self):
        return MappingProxyType(self._outgoing)

    def has_outgoing(self, name):
        return name in self._outgoing

    def get_outgoing(self, name):
        return self._outgoing.get(name)

    def get_incoming(self, name):
        cookie = self._incoming.get(name)
        return None if cookie is None else cookie.copy()

    def set_cookie(self, cookie):
        logger.debug(f"Queue cookie {cookie!r}.")
        self._outgoing[cookie.name] = cookie
        self._incoming.setdefault(cookie.name, cookie.copy())

    def apply(self, response):
        if not self._outgoing:
            return
        if response.prepared:
            logger.warning(f"Response already prepared, cookies {', '.join(self._outgoing)} not sent.")
            return
        for cookie in self._outgoing.values():
            cookie.write_to_response(response)
        logger.debug(f"Applied {len(self._outgoing)} cookie(s) to response.")


def current_context():
    return _current_context.get()


def context_from_request(request):
    return request.get(CONTEXT_KEY)


@aiohttp_web.middleware
async def cookie_context_middleware(request, handler):
    context = CookieContext(request)
    request[CONTEXT_KEY] = context
    token = _current_context.set(context)
    try:
        try:
            response = await handler(request)
        except aiohttp_web.HTTPException as e:
            context.apply(e)
            raise
        context.apply(response)
        return response
    finally:
        _current_context.reset(token)


import autotest
test = autotest.get_tester(__name__)

import asyncio
from aiohttp import DummyCookieJar
from aiohttp.test_utils import TestClient, TestServer
from .testsupport import MockRequest

@test
def test_incoming_from_request():
    context = CookieContext(MockRequest(cookies={'koekje': "A", 'other': "B"}))
    test.eq({'koekje': Cookie('koekje', "A"), 'other': Cookie('other', "B")}, dict(context.incoming))
    test.eq({}, dict(context.outgoing))
    test.eq(Cookie('koekje', "A"), context.get_incoming('koekje'))
    test.eq(None, context.get_incoming('nope'))
    test.eq(False, context.has_outgoing('koekje'))
    test.eq(None, context.get_outgoing('koekje'))

@test
def test_incoming_is_a_snapshot():
    request = MockRequest(cookies={'koekje': "A"})
    context = CookieContext(request)
    request.cookies = {'koekje': "B"}
    test.eq("A", context.get_incoming('koekje').value)

@test
def test_request_required():
    try:
        CookieContext(None)
        test.fail()
    except InvalidArgument as e:
        test.eq("Argument request cannot be None!", str(e))

@test
def test_set_cookie_overwrites_outgoing():
    context = CookieContext(MockRequest())
    context.set_cookie(Cookie('koekje', "A"))
    context.set_cookie(Cookie('other', "X"))
    context.set_cookie(Cookie('koekje', "B"))
    test.eq(['koekje', 'other'], list(context.outgoing))
    test.eq("B", context.get_outgoing('koekje').value)
    test.eq(True, context.has_outgoing('koekje'))

@test
def test_set_cookie_adds_to_incoming_if_absent():
    context = CookieContext(MockRequest())
    cookie = Cookie('koekje', "A")
    context.set_cookie(cookie)
    test.eq(Cookie('koekje', "A"), context.get_incoming('koekje'))
    test.truth(context.get_incoming('koekje') is not cookie)

    context.set_cookie(Cookie('koekje', "B"))
    test.eq("A", context.get_incoming('koekje').value)

@test
def test_set_cookie_never_overwrites_incoming():
    context = CookieContext(MockRequest(cookies={'koekje': "X"}))
    context.set_cookie(Cookie('koekje', "Y"))
    test.eq("X", context.get_incoming('koekje').value)
    test.eq("Y", context.get_outgoing('koekje').value)

@test
def test_apply_writes_outgoing_in_order():
    context = CookieContext(MockRequest())
    context.set_cookie(Cookie('b', "1"))
    context.set_cookie(Cookie('a', "2"))
    context.set_cookie(Cookie('b', "3"))
    response = aiohttp_web.Response()
    context.apply(response)
    test.eq(['b', 'a'], list(response.cookies))
    test.eq("3", response.cookies['b'].value)
    test.eq("2", response.cookies['a'].value)

@test
def test_apply_without_cookies_leaves_response_alone():
    response = aiohttp_web.Response()
    CookieContext(MockRequest()).apply(response)
    test.eq([], list(response.cookies))

@test
def test_no_current_context_outside_request():
    test.eq(None, current_context())

@test
async def test_middleware_installs_context():
    seen = []
    async def handler(request):
        context = current_context()
        seen.append(context)
        test.truth(context is context_from_request(request))
        context.set_cookie(Cookie('koekje', context.get_incoming('koekje').value + "B"))
        return aiohttp_web.Response(text="ok")

    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    app.router.add_get('/', handler)
    async with TestClient(TestServer(app)) as client:
        response = await client.get('/', headers={'Cookie': 'koekje=A'})
        test.eq(200, response.status)
        test.eq(["koekje=AB; Path=/"], response.headers.getall('Set-Cookie'))
    test.eq(1, len(seen))
    test.eq(None, current_context())

@test
async def test_middleware_applies_cookies_to_redirect():
    async def handler(request):
        current_context().set_cookie(Cookie('koekje', "A"))
        raise aiohttp_web.HTTPFound('/elsewhere')

    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    app.router.add_get('/', handler)
    async with TestClient(TestServer(app)) as client:
        response = await client.get('/', allow_redirects=False)
        test.eq(302, response.status)
        test.eq("/elsewhere", response.headers['Location'])
        test.eq(["koekje=A; Path=/"], response.headers.getall('Set-Cookie'))

@test
async def test_middleware_resets_context_on_error():
    async def handler(request):
        raise RuntimeError("broken")

    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    app.router.add_get('/', handler)
    async with TestClient(TestServer(app)) as client:
        response = await client.get('/')
        test.eq(500, response.status)
    test.eq(None, current_context())

@test
async def test_concurrent_requests_are_isolated():
    async def handler(request):
        context = current_context()
        cookie = context.get_incoming('koekje')
        await asyncio.sleep(0.01)
        cookie.value += request.query['letter']
        context.set_cookie(cookie)
        await asyncio.sleep(0.01)
        test.truth(context is current_context())
        return aiohttp_web.Response(text=context.get_outgoing('koekje').value)

    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    app.router.add_get('/', handler)
    async with TestClient(TestServer(app), cookie_jar=DummyCookieJar()) as client:
        async def fetch(start, letter):
            response = await client.get('/', params={'letter': letter}, headers={'Cookie': f'koekje={start}'})
            return await response.text()
        results = await asyncio.gather(fetch("A", "x"), fetch("B", "y"), fetch("C", "z"))
    test.eq(["Ax", "By", "Cz"], results)

class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.WARNING)
        self.messages = []
    def emit(self, record):
        self.messages.append(record.getMessage())

@test
async def test_prepared_response_gets_no_cookies():
    async def handler(request):
        response = aiohttp_web.StreamResponse()
        await response.prepare(request)
        current_context().set_cookie(Cookie('koekje', "A"))
        await response.write(b"streamed")
        await response.write_eof()
        return response

    collect = _Collect()
    logger.addHandler(collect)
    try:
        app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
        app.router.add_get('/', handler)
        async with TestClient(TestServer(app), cookie_jar=DummyCookieJar()) as client:
            response = await client.get('/')
            test.eq(200, response.status)
            test.eq(b"streamed", await response.read())
            test.eq([], response.headers.getall('Set-Cookie', []))
    finally:
        logger.removeHandler(collect)
    test.eq(["Response already prepared, cookies koekje not sent."], collect.messages)
