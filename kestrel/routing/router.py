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

"""Priority-ordered router."""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, NamedTuple, Optional, Tuple

from kestrel.constants import DEFAULT_ENCODING
from kestrel.constants import Priority
from kestrel.errors import MethodNotAllowedError
from kestrel.routing import converters
from kestrel.routing.params import ParamDict
from kestrel.routing.route import Route
from kestrel.routing.route import RouteBuilder

__all__ = ('RouteMatch', 'Router', 'RouterOptions')

_SESSION_ID_PATTERN = re.compile(r';jsessionid=.*$', re.IGNORECASE)


class RouteMatch(NamedTuple):
    """A route found by :meth:`Router.find`.

    Attributes:
        route (Route): The matching route.
        params (dict): Decoded field values, keyed by field name.
        failures (dict): Fields that could not be decoded, mapped to the
            corresponding exception. These fields are absent from `params`.
    """

    route: Route
    params: Dict[str, str]
    failures: Dict[str, Exception]


class RouterOptions:
    """Defines a set of configurable router options.

    Attributes:
        encoding (str): Character encoding used both to decode path fields
            when routing a request and to encode values when generating a
            path (default ``'utf-8'``).
        converters (ConverterRegistry): Reversible converters consulted when
            generating paths. Adding additional converters is simply a
            matter of mapping a value type to a converter instance::

                router.options.converters[Money] = MoneyConverter()

            The registry is preloaded with converters for ``bool``,
            enumerations, ``datetime`` and ``uuid.UUID`` values.

            Warning:

                Converter instances are shared between requests.
                Therefore, in threaded deployments, care must be taken
                to implement custom converters in a thread-safe
                manner.

        default_priority (int): Priority given to routes that do not set
            one (default ``Priority.LOWEST``).
    """

    __slots__ = ('encoding', 'converters', 'default_priority')

    def __init__(self) -> None:
        self.encoding = DEFAULT_ENCODING
        self.converters = converters.builtin_registry()
        self.default_priority = Priority.LOWEST


class Router:
    """Routes request paths to handlers, and handlers back to paths.

    Routes are tried in ascending order of priority; routes with the same
    priority are tried in the order they were added. The first route that
    matches both the path and the HTTP method wins.

    Routes should be added before the router starts serving requests.
    Registering a route replaces the route table as a whole, so lookups
    running concurrently always see a consistent set of routes.
    """

    __slots__ = ('_options', '_routes')

    def __init__(self, options: Optional[RouterOptions] = None) -> None:
        self._options = options or RouterOptions()
        self._routes: Tuple[Route, ...] = ()

    @property
    def options(self) -> RouterOptions:
        return self._options

    @property
    def routes(self) -> Tuple[Route, ...]:
        """Registered routes, in the order they are tried."""
        return self._routes

    def route(self, uri_template: str) -> RouteBuilder:
        """Return a builder for a route, configured with this router's options.

        The built route still needs to be registered with
        :meth:`register`.
        """

        return RouteBuilder(
            uri_template,
            converters=self._options.converters,
            encoding=self._options.encoding,
            priority=self._options.default_priority,
        )

    def register(self, route: Route) -> Route:
        """Add a built route to the route table."""

        routes = list(self._routes)

        # NOTE: Insert after every route with the same or a lower priority
        #   value, so that ties are resolved in registration order.
        index = len(routes)
        for i, existing in enumerate(routes):
            if route.priority < existing.priority:
                index = i
                break

        routes.insert(index, route)
        self._routes = tuple(routes)

        return route

    def add_route(
        self,
        uri_template: str,
        handler: Callable[..., Any],
        methods: Iterable[str] = (),
        priority: Optional[int] = None,
        patterns: Optional[Dict[str, str]] = None,
    ) -> Route:
        """Build and register a route between a URI template and a handler.

        Args:
            uri_template (str): The URI template of the route.
            handler: The callable to bind the route to.

        Keyword Args:
            methods: HTTP methods accepted by the route (default: any).
            priority (int): Priority of the route (default:
                ``options.default_priority``).
            patterns (dict): Explicit regular expressions for some of the
                template's fields, keyed by bare field name.

        Returns:
            Route: The registered route.
        """

        builder = self.route(uri_template).with_methods(methods)
        if priority is not None:
            builder.with_priority(priority)

        for name, regex in (patterns or {}).items():
            builder.with_parameter(name).matching(regex)

        return self.register(builder.to(handler).build())

    def find(self, uri: str, method: str = 'GET') -> Optional[RouteMatch]:
        """Search for the route that matches a request.

        Any query string or ``;jsessionid=`` suffix is removed from `uri`
        before it is matched.

        Args:
            uri (str): The requested path.

        Keyword Args:
            method (str): The requested HTTP method (default ``'GET'``).

        Returns:
            RouteMatch: The first route accepting both the path and the
            method, together with the decoded field values; or ``None`` if
            no route matches the path.

        Raises:
            MethodNotAllowedError: At least one route matches the path, but
                none of them accepts the method.
        """

        path = _SESSION_ID_PATTERN.sub('', uri.split('?', 1)[0])

        allowed = set()
        for route in self._routes:
            if not route.matches(path):
                continue

            if route.accepts(method):
                params = ParamDict()
                result = route.fill_into(path, params)
                return RouteMatch(route, params, result.failures)

            allowed.update(route.methods)

        if allowed:
            raise MethodNotAllowedError(method.upper(), allowed)

        return None

    def url_for(self, handler: Callable[..., Any], *values: Any) -> str:
        """Generate the path for calling `handler` with the given arguments.

        The first registered route bound to `handler` is used.

        Raises:
            ValueError: No route is bound to `handler`.
            ParameterArityError: The number of values differs from the
                number of parameters declared by `handler`.
        """

        for route in self._routes:
            if route.handler == handler:
                return route.fill_path(*values)

        raise ValueError('No route is bound to {!r}'.format(handler))
