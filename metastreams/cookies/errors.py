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

__all__ = ['InvalidArgument', 'check_name']


class InvalidArgument(ValueError):
    pass


def check_name(name):
    if not isinstance(name, str) or not name:
        raise InvalidArgument(f"Cookie name must be a non-empty string, not {name!r}!")
    return name


import autotest
test = autotest.get_tester(__name__)


@test
def test_check_name():
    test.eq("koekje", check_name("koekje"))
    for wrong in ["", None, 42]:
        try:
            check_name(wrong)
            test.fail()
        except InvalidArgument as e:
            test.eq(f"Cookie name must be a non-empty string, not {wrong!r}!", str(e))

@test
def test_invalid_argument_is_a_value_error():
    test.truth(issubclass(InvalidArgument, ValueError))
