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

from datetime import datetime, timedelta, timezone

from .cookie import Cookie
from .context import current_context, context_from_request
from .errors import InvalidArgument, check_name

import logging
logger = logging.getLogger(__name__)

__all__ = ['CookieWrapper']


class CookieWrapper:
    """Cookies of one request, so you don't have to worry about lost changes,
    duplicates, or reading from the wrong collection.

    Once a cookie is queued on the response, every later read in the same
    request gets the queued cookie instead of the one the client sent.
    """

    def __init__(self, context):
        if context is None:
            raise InvalidArgument("Argument context cannot be None!")
        self._context = context

    @classmethod
    def from_current(cls):
        return cls(current_context())

    @classmethod
    def from_request(cls, request):
        return cls(context_from_request(request))

    @property
    def context(self):
        return self._context

    def get(self, name):
        check_name(name)
        if self._context.has_outgoing(name):
            return self._context.get_outgoing(name)
        return self._context.get_incoming(name)

    def set(self, cookie, name=None):
        if name is not None and name != cookie.name:
            # to change the name, expire the old cookie and create a new one
            raise InvalidArgument(f"Cookie name {cookie.name} cannot be changed to {name}!")
        self._context.set_cookie(cookie)

    def expire(self, name):
        # deleting from the response does nothing on the client, it needs an expired cookie
        cookie = Cookie(name, expires=datetime.now(timezone.utc) - timedelta(days=1))
        logger.debug(f"Expire cookie {name!r}.")
        self._context.set_cookie(cookie)
        return cookie

    def update(self, name, func):
        cookie = self.get(name) or Cookie(name)
        cookie.value = func(cookie.value)
        self.set(cookie)
        return cookie


import autotest
test = autotest.get_tester(__name__)

from .testsupport import MockRequest, mock_context
from .context import CookieContext, CONTEXT_KEY, _current_context


@test
def test_context_required():
    try:
        CookieWrapper(None)
        test.fail()
    except InvalidArgument as e:
        test.eq("Argument context cannot be None!", str(e))

@test
def test_from_current_outside_request():
    try:
        CookieWrapper.from_current()
        test.fail()
    except InvalidArgument as e:
        test.eq("Argument context cannot be None!", str(e))

@test
def test_from_current_resolves_once():
    context = mock_context()
    token = _current_context.set(context)
    try:
        cookies = CookieWrapper.from_current()
    finally:
        _current_context.reset(token)
    test.truth(cookies.context is context)
    cookies.set(Cookie('koekje', "A"))
    test.eq("A", context.get_outgoing('koekje').value)

@test
def test_from_request():
    request = MockRequest()
    context = CookieContext(request)
    request[CONTEXT_KEY] = context
    test.truth(CookieWrapper.from_request(request).context is context)
    try:
        CookieWrapper.from_request(MockRequest())
        test.fail()
    except InvalidArgument:
        pass

@test
def test_get_absent():
    cookies = CookieWrapper(mock_context())
    test.eq(None, cookies.get('koekje'))

@test
def test_get_incoming_unchanged():
    cookies = CookieWrapper(mock_context({'koekje': "A"}))
    test.eq(Cookie('koekje', "A"), cookies.get('koekje'))

@test
def test_get_incoming_preserves_expires():
    context = mock_context()
    expires = datetime(2030, 1, 1, tzinfo=timezone.utc)
    context._incoming['koekje'] = Cookie('koekje', "A", expires=expires)
    cookie = CookieWrapper(context).get('koekje')
    test.eq("A", cookie.value)
    test.eq(expires, cookie.expires)

@test
def test_get_requires_name():
    cookies = CookieWrapper(mock_context())
    try:
        cookies.get('')
        test.fail()
    except InvalidArgument:
        pass

@test
def test_read_after_write_is_not_stale():
    cookies = CookieWrapper(mock_context())
    cookies.set(Cookie('koekje', "V1"))
    test.eq("V1", cookies.get('koekje').value)
    cookies.set(Cookie('koekje', "V2"))
    test.eq("V2", cookies.get('koekje').value)

@test
def test_incoming_not_consulted_after_set():
    context = mock_context({'koekje': "original"})
    cookies = CookieWrapper(context)
    cookies.set(Cookie('koekje', "new"))
    test.eq("original", context.get_incoming('koekje').value)
    test.eq("new", cookies.get('koekje').value)
    cookie = cookies.get('koekje')
    cookie.value += "er"
    cookies.set(cookie)
    test.eq("newer", cookies.get('koekje').value)
    test.eq("original", context.get_incoming('koekje').value)

@test
def test_set_with_matching_name():
    context = mock_context()
    cookies = CookieWrapper(context)
    cookies.set(Cookie('koekje', "A"), name='koekje')
    test.eq("A", context.get_outgoing('koekje').value)

@test
def test_set_cannot_rename():
    context = mock_context({'other': "X"})
    cookies = CookieWrapper(context)
    cookies.set(Cookie('koekje', "A"))
    incoming, outgoing = dict(context.incoming), dict(context.outgoing)
    try:
        cookies.set(Cookie('koekje', "B"), name='other')
        test.fail()
    except InvalidArgument as e:
        test.eq("Cookie name koekje cannot be changed to other!", str(e))
    test.eq(incoming, dict(context.incoming))
    test.eq(outgoing, dict(context.outgoing))
    test.eq("A", context.get_outgoing('koekje').value)
    test.eq("X", context.get_incoming('other').value)

@test
def test_expire():
    context = mock_context({'koekje': "A"})
    cookies = CookieWrapper(context)
    before = datetime.now(timezone.utc)
    cookie = cookies.expire('koekje')
    test.truth(context.get_outgoing('koekje') is cookie)
    test.eq("", cookie.value)
    test.truth(cookie.expires < before)
    test.truth(cookie.is_expired())
    test.eq("A", context.get_incoming('koekje').value)
    test.truth(cookies.get('koekje') is cookie)

@test
def test_expire_unknown_cookie():
    context = mock_context()
    cookie = CookieWrapper(context).expire('koekje')
    test.eq(['koekje'], list(context.outgoing))
    test.eq(cookie, context.get_incoming('koekje'))

@test
def test_expire_requires_name():
    try:
        CookieWrapper(mock_context()).expire('')
        test.fail()
    except InvalidArgument:
        pass

@test
def test_expire_writes_past_date_to_response():
    from aiohttp import web as aiohttp_web
    from email.utils import parsedate_to_datetime
    context = mock_context()
    before = datetime.now(timezone.utc)
    CookieWrapper(context).expire('koekje')
    response = aiohttp_web.Response()
    context.apply(response)
    test.truth(parsedate_to_datetime(response.cookies['koekje']['expires']) < before)

@test
def test_update():
    cookies = CookieWrapper(mock_context({'koekje': "X"}))
    test.eq("XA", cookies.update('koekje', lambda v: v + "A").value)
    test.eq("XAB", cookies.update('koekje', lambda v: v + "B").value)
    test.eq("1", cookies.update('new', lambda v: v + "1").value)


def append_letters(read, write, name):
    for letter in "ABCD":
        cookie = read(name) or Cookie(name)
        cookie.value = cookie.value + letter
        write(cookie)

@test
def test_sequential_updates_through_wrapper():
    context = mock_context()
    cookies = CookieWrapper(context)
    append_letters(cookies.get, cookies.set, 'counter')
    test.eq("ABCD", cookies.get('counter').value)
    test.eq("ABCD", context.get_outgoing('counter').value)

@test
def test_sequential_updates_reading_client_cookies_lose_writes():
    request = MockRequest()
    context = CookieContext(request)
    append_letters(lambda name: Cookie.from_request(request, name), context.set_cookie, 'counter')
    test.eq("D", context.get_outgoing('counter').value)
    test.eq("D", CookieWrapper(context).get('counter').value)

@test
def test_sequential_updates_reading_incoming_lose_writes():
    context = mock_context({'counter': "X"})
    append_letters(context.get_incoming, context.set_cookie, 'counter')
    test.eq("XD", context.get_outgoing('counter').value)

    cookies = CookieWrapper(mock_context({'counter': "X"}))
    append_letters(cookies.get, cookies.set, 'counter')
    test.eq("XABCD", cookies.get('counter').value)

@test
def test_update_leaves_incoming_alone():
    context = mock_context({'koekje': "X"})
    cookies = CookieWrapper(context)
    cookies.update('koekje', lambda v: v + "A")
    test.eq("X", context.get_incoming('koekje').value)
    test.eq("XA", context.get_outgoing('koekje').value)

@test
def test_get_hands_out_copy_of_incoming():
    context = mock_context({'koekje': "X"})
    cookie = CookieWrapper(context).get('koekje')
    cookie.value = "changed"
    test.eq("X", context.get_incoming('koekje').value)
    test.eq({}, dict(context.outgoing))
