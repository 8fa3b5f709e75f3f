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

"""Exception classes raised while compiling, building and using routes.

Failures that can only be caused by a programming or configuration error
(malformed templates, routes without a handler, reverse routing with the
wrong number of values) are raised immediately. Problems with request data,
such as malformed percent-escapes in a path, are never raised; they are
logged and reported through :class:`~kestrel.routing.params.BindResult`
instead.
"""

from __future__ import annotations

from typing import Iterable

__all__ = (
    'IllegalRouteError',
    'MalformedTemplateError',
    'MethodNotAllowedError',
    'ParameterArityError',
    'RouteNotBoundError',
)


class MalformedTemplateError(ValueError):
    """The URI template could not be compiled.

    Raised for unbalanced braces, empty placeholders, and field expressions
    whose regular expression does not compile.
    """

    def __init__(self, template: str, reason: str) -> None:
        super().__init__('Malformed URI template {!r}: {}'.format(template, reason))
        self.template = template
        self.reason = reason


class ParameterArityError(ValueError):
    """The declared parameters and the supplied values differ in length."""


class IllegalRouteError(ValueError):
    """The route is not configured correctly."""


class RouteNotBoundError(IllegalRouteError):
    """A route was built without binding it to a handler."""


class MethodNotAllowedError(Exception):
    """The path matched at least one route, but none accepts the method.

    Attributes:
        method (str): The HTTP method that was requested.
        allowed_methods (list): Sorted list of the methods accepted by the
            routes that matched the path.
    """

    def __init__(self, method: str, allowed_methods: Iterable[str]) -> None:
        self.method = method
        self.allowed_methods = sorted(allowed_methods)
        super().__init__(
            'Method {} not allowed; allowed methods: {}'.format(
                method, ', '.join(self.allowed_methods)
            )
        )
