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

"""Primary package for Kestrel, a URI template routing engine.

Kestrel maps request paths to handlers using URI templates, and generates
paths for handlers from the same templates::

    import kestrel

    router = kestrel.Router()
    router.add_route('/items/{item_id}', get_item, methods=['GET'])

    match = router.find('/items/42')
    router.url_for(get_item, 42)
"""

import logging as _logging

__all__ = (
    # Routing
    'Char',
    'CompiledTemplate',
    'ConverterRegistry',
    'ReverseBuilder',
    'Route',
    'RouteBuilder',
    'RouteMatch',
    'Router',
    'RouterOptions',
    'compile_template',
    # Public constants
    'COMBINED_METHODS',
    'DEFAULT_ENCODING',
    'HTTP_METHODS',
    'Priority',
    'WEBDAV_METHODS',
    # Errors
    'IllegalRouteError',
    'MalformedTemplateError',
    'MethodNotAllowedError',
    'ParameterArityError',
    'RouteNotBoundError',
    # Utilities
    'uri',
)

from kestrel.constants import COMBINED_METHODS
from kestrel.constants import DEFAULT_ENCODING
from kestrel.constants import HTTP_METHODS
from kestrel.constants import Priority
from kestrel.constants import WEBDAV_METHODS
from kestrel.errors import IllegalRouteError
from kestrel.errors import MalformedTemplateError
from kestrel.errors import MethodNotAllowedError
from kestrel.errors import ParameterArityError
from kestrel.errors import RouteNotBoundError
from kestrel.routing import Char
from kestrel.routing import compile_template
from kestrel.routing import CompiledTemplate
from kestrel.routing import ConverterRegistry
from kestrel.routing import ReverseBuilder
from kestrel.routing import Route
from kestrel.routing import RouteBuilder
from kestrel.routing import RouteMatch
from kestrel.routing import Router
from kestrel.routing import RouterOptions
from kestrel.util import uri

# Package version
from kestrel.version import __version__  # NOQA: F401

# NOTE: Modules log through this logger, referencing it as kestrel._logger
#   at call time.
_logger = _logging.getLogger('kestrel')
_logger.addHandler(_logging.NullHandler())
