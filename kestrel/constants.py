# Copyright 2013 by Rackspace Hosting, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from enum import IntEnum
import os

__all__ = (
    'HTTP_METHODS',
    'WEBDAV_METHODS',
    'COMBINED_METHODS',
    'DEFAULT_ENCODING',
    'Priority',
)

# RFC 7231, 5789 methods
HTTP_METHODS = [
    'CONNECT',
    'DELETE',
    'GET',
    'HEAD',
    'OPTIONS',
    'PATCH',
    'POST',
    'PUT',
    'TRACE',
]

# RFC 2518 and 4918 methods
WEBDAV_METHODS = [
    'CHECKIN',
    'CHECKOUT',
    'COPY',
    'LOCK',
    'MKCOL',
    'MOVE',
    'PROPFIND',
    'PROPPATCH',
    'REPORT',
    'UNCHECKIN',
    'UNLOCK',
    'UPDATE',
    'VERSION-CONTROL',
]

# if KESTREL_CUSTOM_HTTP_METHODS is defined, treat it as a comma-
# delimited string of additional supported methods in this env.
KESTREL_CUSTOM_HTTP_METHODS = [
    method.strip().upper()
    for method in os.environ.get('KESTREL_CUSTOM_HTTP_METHODS', '').split(',')
    if method.strip() != ''
]

COMBINED_METHODS = HTTP_METHODS + WEBDAV_METHODS + KESTREL_CUSTOM_HTTP_METHODS

# NOTE: The same encoding must be used to decode captured path parameters
#   and to encode them again during reverse routing, otherwise generated
#   links will not round-trip.
DEFAULT_ENCODING = 'utf-8'


class Priority(IntEnum):
    """Well-known route priorities.

    Routes are tried in ascending order of priority, so a lower value wins
    when more than one route matches the same path. Any other integer may
    be used as well.
    """

    HIGHEST = 0
    HIGH = 10
    DEFAULT = 20
    LOW = 30
    LOWEST = 40
