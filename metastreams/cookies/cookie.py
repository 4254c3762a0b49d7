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

import copy
from datetime import datetime, timezone
from email.utils import format_datetime

from .errors import check_name

__all__ = ['Cookie', 'http_date']


def http_date(moment):
    return format_datetime(moment.astimezone(timezone.utc), usegmt=True)


class Cookie:
    """A single cookie, identified by its name.

    The name cannot be changed once created. To move a value to another name,
    expire the old cookie and create a new one. Path, domain, max_age, secure,
    httponly and samesite are passed on to aiohttp as they are; None means
    "leave it to aiohttp".
    """

    def __init__(self, name, value="", expires=None, path="/", domain=None, max_age=None, secure=None, httponly=None, samesite=None):
        self._name = check_name(name)
        self.value = value
        self.expires = expires
        self.path = path
        self.domain = domain
        self.max_age = max_age
        self.secure = secure
        self.httponly = httponly
        self.samesite = samesite

    @classmethod
    def from_request(cls, request, name):
        value = request.cookies.get(name)
        if value is None:
            return None
        return cls(name, value)

    @property
    def name(self):
        return self._name

    def is_expired(self, now=None):
        if self.expires is None:
            return False
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        return self.expires.astimezone(timezone.utc) < now

    def copy(self):
        return copy.copy(self)

    def write_to_response(self, response):
        optional = dict(domain=self.domain, max_age=self.max_age, secure=self.secure, httponly=self.httponly, samesite=self.samesite)
        kwargs = {k: v for k, v in optional.items() if v is not None}
        if self.expires is not None:
            kwargs['expires'] = http_date(self.expires)
        response.set_cookie(self._name, self.value, path=self.path, **kwargs)

    def _as_tuple(self):
        return (self._name, self.value, self.expires, self.path, self.domain, self.max_age, self.secure, self.httponly, self.samesite)

    def __eq__(self, other):
        if not isinstance(other, Cookie):
            return NotImplemented
        return self._as_tuple() == other._as_tuple()

    def __hash__(self):
        return hash(self._name)

    def __repr__(self):
        return f"Cookie({self._name!r}, value={self.value!r}, expires={self.expires!r})"


import autotest
test = autotest.get_tester(__name__)

from datetime import timedelta
from aiohttp import web as aiohttp_web
from .errors import InvalidArgument

class MockRequest:
    def __init__(self):
        self.cookies = {}

@test
def test_read_cookie():
    request = MockRequest()

    test.eq(None, Cookie.from_request(request, "koekje"))
    request.cookies['koekje'] = "something"
    cookie = Cookie.from_request(request, "koekje")
    test.eq("koekje", cookie.name)
    test.eq("something", cookie.value)
    test.eq(None, cookie.expires)

@test
def test_write_cookie():
    cookie = Cookie("koekje", "The Value")
    response = aiohttp_web.StreamResponse()

    cookie.write_to_response(response)
    test.eq('Set-Cookie: koekje="The Value"; Path=/', str(response.cookies))

@test
def test_write_cookie_with_expires():
    cookie = Cookie("koekje", expires=datetime(2019, 3, 4, 12, 30, tzinfo=timezone.utc))
    response = aiohttp_web.StreamResponse()

    cookie.write_to_response(response)
    test.eq("Mon, 04 Mar 2019 12:30:00 GMT", response.cookies['koekje']['expires'])
    test.eq("", response.cookies['koekje'].value)

@test
def test_write_cookie_passes_attributes():
    cookie = Cookie("koekje", "value", path="/shop", domain="example.org", max_age=60, secure=True, httponly=True, samesite="Strict")
    response = aiohttp_web.StreamResponse()

    cookie.write_to_response(response)
    morsel = response.cookies['koekje']
    test.eq("/shop", morsel['path'])
    test.eq("example.org", morsel['domain'])
    test.eq("60", morsel['max-age'])
    test.eq(True, morsel['secure'])
    test.eq(True, morsel['httponly'])
    test.eq("Strict", morsel['samesite'])

@test
def test_name_is_read_only():
    cookie = Cookie("koekje")
    try:
        cookie.name = "other"
        test.fail()
    except AttributeError:
        pass
    test.eq("koekje", cookie.name)

@test
def test_name_required():
    try:
        Cookie("")
        test.fail()
    except InvalidArgument as e:
        test.eq("Cookie name must be a non-empty string, not ''!", str(e))

@test
def test_is_expired():
    now = datetime.now(timezone.utc)
    test.eq(False, Cookie("koekje").is_expired())
    test.eq(True, Cookie("koekje", expires=now - timedelta(days=1)).is_expired())
    test.eq(False, Cookie("koekje", expires=now + timedelta(days=1)).is_expired())
    test.eq(True, Cookie("koekje", expires=now).is_expired(now=now + timedelta(seconds=1)))

@test
def test_is_expired_with_naive_datetimes():
    local_now = datetime.now()
    test.eq(True, Cookie("koekje", expires=datetime(2000, 1, 1)).is_expired())
    test.eq(False, Cookie("koekje", expires=local_now + timedelta(days=1)).is_expired())
    test.eq(True, Cookie("koekje", expires=local_now - timedelta(days=1)).is_expired(now=local_now))
    test.eq(False, Cookie("koekje", expires=datetime.now(timezone.utc)).is_expired(now=local_now - timedelta(days=1)))

@test
def test_copy_and_equality():
    cookie = Cookie("koekje", "A")
    other = cookie.copy()
    test.eq(cookie, other)
    test.truth(cookie is not other)
    other.value = "B"
    test.ne(cookie, other)
    test.eq("A", cookie.value)
    test.eq("Cookie('koekje', value='A', expires=None)", repr(cookie))
