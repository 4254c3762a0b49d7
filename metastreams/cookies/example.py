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

from html import escape

from aiohttp import web as aiohttp_web

from .cookie import Cookie
from .cookiewrapper import CookieWrapper

__all__ = ['IndexModel', 'ExampleController', 'render_index', 'index_handler']


class IndexModel:
    def __init__(self, bad_value=None, good_value=None):
        self.bad_value = bad_value
        self.good_value = good_value


class ExampleController:
    """Updates one cookie four times in a single request, once reading the
    cookies the client sent (losing all but the last update) and once
    through a CookieWrapper."""

    def __init__(self, cookies=None):
        self._cookies = CookieWrapper.from_current() if cookies is None else cookies

    def index(self):
        self.update_cookie_the_wrong_way("badcookie", "A")
        self.update_cookie_the_wrong_way("badcookie", "B")
        self.update_cookie_the_wrong_way("badcookie", "C")
        self.update_cookie_the_wrong_way("badcookie", "D")

        self.update_cookie("goodcookie", "A")
        self.update_cookie("goodcookie", "B")
        self.update_cookie("goodcookie", "C")
        self.update_cookie("goodcookie", "D")

        return IndexModel(
            bad_value=self._cookies.get("badcookie").value,
            good_value=self._cookies.get("goodcookie").value)

    def update_cookie_the_wrong_way(self, name, value):
        # Warning: don't do this!
        context = self._cookies.context
        cookie = Cookie.from_request(context.request, name) or Cookie(name)
        cookie.value = cookie.value + value
        context.set_cookie(cookie)

    def update_cookie(self, name, value):
        cookie = self._cookies.get(name) or Cookie(name)
        cookie.value = cookie.value + value
        self._cookies.set(cookie)


def render_index(model):
    return f"""<!DOCTYPE html>
<html>
<head><title>Cookie Wrapper</title></head>
<body>
<h1>Cookie Wrapper</h1>
<dl>
<dt>Updated by reading the request cookies</dt>
<dd id="bad">{escape(model.bad_value or '')}</dd>
<dt>Updated through the cookie wrapper</dt>
<dd id="good">{escape(model.good_value or '')}</dd>
</dl>
</body>
</html>
"""


async def index_handler(request):
    model = ExampleController().index()
    return aiohttp_web.Response(text=render_index(model), content_type='text/html')


import autotest
test = autotest.get_tester(__name__)

from aiohttp import DummyCookieJar
from aiohttp.test_utils import TestClient, TestServer
from .context import cookie_context_middleware
from .testsupport import mock_context


@test
def test_index_on_first_visit():
    context = mock_context()
    model = ExampleController(CookieWrapper(context)).index()
    test.eq("D", model.bad_value)
    test.eq("ABCD", model.good_value)
    test.eq(['badcookie', 'goodcookie'], list(context.outgoing))

@test
def test_index_on_second_visit():
    context = mock_context({'badcookie': "D", 'goodcookie': "ABCD"})
    model = ExampleController(CookieWrapper(context)).index()
    test.eq("DD", model.bad_value)
    test.eq("ABCDABCD", model.good_value)

@test
def test_controller_without_request():
    try:
        ExampleController()
        test.fail()
    except ValueError as e:
        test.eq("Argument context cannot be None!", str(e))

@test
def test_render_index_escapes():
    page = render_index(IndexModel(bad_value="<D>", good_value="ABCD"))
    test.contains(page, '<dd id="bad">&lt;D&gt;</dd>')
    test.contains(page, '<dd id="good">ABCD</dd>')
    test.contains(render_index(IndexModel()), '<dd id="good"></dd>')

@test
async def test_index_handler():
    app = aiohttp_web.Application(middlewares=[cookie_context_middleware])
    app.router.add_get('/', index_handler)
    async with TestClient(TestServer(app), cookie_jar=DummyCookieJar()) as client:
        response = await client.get('/')
        test.eq(200, response.status)
        test.eq("text/html", response.content_type)
        page = await response.text()
        test.contains(page, '<dd id="bad">D</dd>')
        test.contains(page, '<dd id="good">ABCD</dd>')
        test.eq(["badcookie=D; Path=/", "goodcookie=ABCD; Path=/"], response.headers.getall('Set-Cookie'))

        response = await client.get('/', headers={'Cookie': 'badcookie=D; goodcookie=ABCD'})
        page = await response.text()
        test.contains(page, '<dd id="bad">DD</dd>')
        test.contains(page, '<dd id="good">ABCDABCD</dd>')
