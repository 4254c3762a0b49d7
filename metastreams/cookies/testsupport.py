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

from types import MappingProxyType

__all__ = ['MockRequest', 'mock_context']


class MockRequest(dict):
    """Stands in for an aiohttp request: read-only cookies and item storage."""
    def __init__(self, cookies=None):
        super().__init__()
        self.cookies = MappingProxyType(dict(cookies or {}))


def mock_context(cookies=None):
    from .context import CookieContext
    return CookieContext(MockRequest(cookies=cookies))


import autotest
test = autotest.get_tester(__name__)


@test
def mock_request_cookies_are_read_only():
    request = MockRequest(cookies={'koekje': "A"})
    test.eq("A", request.cookies['koekje'])
    try:
        request.cookies['koekje'] = "B"
        test.fail()
    except TypeError:
        pass
    request['key'] = 'value'
    test.eq('value', request.get('key'))

@test
def mock_context_with_cookies():
    context = mock_context({'koekje': "A"})
    test.eq("A", context.get_incoming('koekje').value)
    test.eq({}, dict(context.outgoing))
