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

from setuptools import setup, find_namespace_packages

setup(
    name='metastreams-cookies',
    packages=find_namespace_packages(include=['metastreams.*']),
    scripts=['bin/metastreams-cookies-server'],
    install_requires=['aiohttp', 'autotest'],
    version='1.0',
    author='Seecr (Seek You Too B.V.)',
    author_email='info@seecr.nl',
    description='Metastreams Cookies keeps cookie reads consistent with the cookies queued on the response',
    long_description='Metastreams Cookies wraps the aiohttp request and response cookies so that, within one request, a cookie read always sees the latest value written to the response.',
    license='GNU Public License',
    platforms='all',
)
