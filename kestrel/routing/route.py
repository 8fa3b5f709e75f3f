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

"""Route descriptors, and the builder used to declare them."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, Sequence

import kestrel
from kestrel import constants
from kestrel.constants import DEFAULT_ENCODING
from kestrel.constants import Priority
from kestrel.errors import RouteNotBoundError
from kestrel.routing.converters import ConverterRegistry
from kestrel.routing.inference import regex_for
from kestrel.routing.params import bind
from kestrel.routing.params import BindResult
from kestrel.routing.params import ParamSink
from kestrel.routing.reverse import ReverseBuilder
from kestrel.routing.template import compile_template
from kestrel.routing.template import CompiledTemplate
from kestrel.routing.template import field_names
from kestrel.util.misc import get_declared_params
from kestrel.util.misc import Parameter
from kestrel.util.misc import resolve_param_type

__all__ = ('ParameterBuilder', 'Route', 'RouteBuilder')


def _normalize_method(method: str) -> str:
    normalized = method.strip().upper()
    if normalized not in constants.COMBINED_METHODS:
        raise ValueError('Unknown HTTP method: "{}"'.format(method))

    return normalized


def _methods_str(methods: Iterable[str]) -> str:
    return '[{}]'.format(', '.join(sorted(methods))) if methods else '[ALL]'


class Route:
    """A URI template bound to a handler.

    Routes are created with :class:`RouteBuilder` and are immutable once
    built, so that they may be matched concurrently from any number of
    threads.

    Attributes:
        uri_template (str): The URI template of the route.
        handler: The callable the route is bound to.
        methods (frozenset): HTTP methods accepted by the route. An empty
            set means that any method is accepted.
        priority (int): Routes with a lower priority value are tried first.
        declared_params (tuple): The handler's declared parameters, as
            :class:`~kestrel.util.misc.Parameter` tuples.
    """

    __slots__ = (
        'uri_template',
        'handler',
        'methods',
        'priority',
        'declared_params',
        '_compiled',
        '_reverse',
        '_encoding',
    )

    def __init__(
        self,
        compiled: CompiledTemplate,
        handler: Callable[..., Any],
        methods: Iterable[str] = (),
        priority: int = Priority.LOWEST,
        declared_params: Sequence[Parameter] = (),
        converters: Optional[ConverterRegistry] = None,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.uri_template = compiled.template
        self.handler = handler
        self.methods = frozenset(methods)
        self.priority = priority
        self.declared_params = tuple(declared_params)

        self._compiled = compiled
        self._reverse = ReverseBuilder(compiled, converters=converters, encoding=encoding)
        self._encoding = encoding

    @property
    def param_names(self):
        """Bare field names of the URI template, in document order."""
        return self._compiled.param_names

    @property
    def compiled(self) -> CompiledTemplate:
        return self._compiled

    def matches(self, path: str) -> bool:
        """Return ``True`` if the whole `path` matches this route's template."""
        return self._compiled.matches(path)

    def accepts(self, method: str) -> bool:
        """Return ``True`` if this route accepts the given HTTP method."""
        return not self.methods or method.upper() in self.methods

    def extract(self, path: str) -> List[str]:
        """Return the raw field values captured from `path`.

        See also :meth:`~kestrel.routing.template.CompiledTemplate.extract`.
        """
        return self._compiled.extract(path)

    def fill_into(self, path: str, sink: ParamSink) -> BindResult:
        """Decode the fields captured from `path` into a parameter sink.

        Nothing is bound if `path` does not match the route.

        Returns:
            BindResult: The bound values and any decoding failures.
        """

        if not self._compiled.matches(path):
            return BindResult()

        return bind(
            self._compiled.extract(path),
            self._compiled.param_names,
            sink,
            encoding=self._encoding,
        )

    def fill_path(self, *values: Any) -> str:
        """Generate the path that routes to the handler with the given arguments.

        Args:
            *values: Arguments aligned with the handler's declared
                parameters.

        Raises:
            ParameterArityError: The number of values differs from the
                number of declared parameters.
        """
        return self._reverse.fill(self.declared_params, values)

    def apply(self, values: Sequence[Any]) -> str:
        """Fill in the template's fields in order; see :meth:`.ReverseBuilder.apply`."""
        return self._reverse.apply(values)

    def __lt__(self, other: 'Route') -> bool:
        return self.priority < other.priority

    def __repr__(self) -> str:
        return '<Route: {} {} -> {!r} (priority={})>'.format(
            self.uri_template, _methods_str(self.methods), self.handler, int(self.priority)
        )


class ParameterBuilder:
    """Configures the pattern of a single field; see :meth:`RouteBuilder.with_parameter`."""

    __slots__ = ('_route_builder', '_name')

    def __init__(self, route_builder: RouteBuilder, name: str) -> None:
        self._route_builder = route_builder
        self._name = name

    def of_type(self, tp: Any) -> RouteBuilder:
        """Match the field with the default pattern for values of type `tp`."""
        self._route_builder._patterns[self._name] = regex_for(tp)
        return self._route_builder

    def matching(self, regex: str) -> RouteBuilder:
        """Match the field with the given regular expression."""
        self._route_builder._patterns[self._name] = regex
        return self._route_builder


class RouteBuilder:
    """Declares a route for a URI template.

    A builder is configured fluently and then turned into an immutable
    :class:`Route`::

        route = (
            RouteBuilder('/users/{user.id}/posts/{page}')
            .with_method('GET')
            .with_parameter('page').matching(r'\\d{1,3}')
            .to(list_posts)
            .build()
        )

    Fields without an explicit pattern (configured with
    :meth:`with_parameter`, or written in the template itself) get one
    inferred from the type annotation of the matching handler argument.

    If not specified, the built route will have the lowest priority, so it
    will be the last one to be tried.

    Args:
        uri_template (str): The URI template of the route.

    Keyword Args:
        converters (ConverterRegistry): Reversible converters used when
            generating paths for the route (default: the built-in
            converters).        encoding (str): Character encoding of the route's path fields
            (default ``'utf-8'``).
        priority (int): Initial priority of the route (default
            ``Priority.LOWEST``).
    """

    def __init__(
        self,
        uri_template: str,
        converters: Optional[ConverterRegistry] = None,
        encoding: str = DEFAULT_ENCODING,
        priority: int = Priority.LOWEST,
    ) -> None:
        self._uri_template = uri_template
        self._converters = converters
        self._encoding = encoding
        self._priority = priority

        self._methods: set = set()
        self._patterns: dict = {}
        self._handler: Optional[Callable[..., Any]] = None
        self._declared_params: List[Parameter] = []

    def with_method(self, method: str) -> RouteBuilder:
        """Accept the given HTTP method.

        Unless this method (or :meth:`with_methods`) is called, the route
        accepts any method.
        """

        self._methods.add(_normalize_method(method))
        return self

    def with_methods(self, methods: Iterable[str]) -> RouteBuilder:
        """Accept each of the given HTTP methods."""

        for method in methods:
            self.with_method(method)

        return self

    def with_priority(self, priority: int) -> RouteBuilder:
        """Change the priority of the route."""

        self._priority = priority
        return self

    def with_parameter(self, name: str) -> ParameterBuilder:
        """Configure the pattern of the field with the given bare name."""

        return ParameterBuilder(self, name)

    def to(self, handler: Callable[..., Any]) -> RouteBuilder:
        """Bind the route to a handler.

        The handler's declared parameters are used both to infer default
        field patterns and to generate paths for the route.
        """

        if not callable(handler):
            raise TypeError('The route handler must be callable ({!r} is not)'.format(handler))

        self._handler = handler
        self._declared_params = get_declared_params(handler)
        return self

    def build(self) -> Route:
        """Compile the template and return the route.

        Raises:
            RouteNotBoundError: No handler was bound with :meth:`to`.
            MalformedTemplateError: The URI template is malformed.
        """

        if self._handler is None:
            raise RouteNotBoundError(
                'You have created a route, but did not specify any handler '
                'to be invoked: {}'.format(self._uri_template)
            )

        param_types = {
            name: resolve_param_type(self._declared_params, name)
            for name in field_names(self._uri_template)
        }

        compiled = compile_template(
            self._uri_template,
            parameter_patterns=self._patterns,
            param_types=param_types,
        )

        kestrel._logger.info(
            '%-50s%s -> %10s',
            self._uri_template,
            _methods_str(self._methods),
            getattr(self._handler, '__qualname__', repr(self._handler)),
        )

        return Route(
            compiled,
            self._handler,
            methods=self._methods,
            priority=self._priority,
            declared_params=self._declared_params,
            converters=self._converters,
            encoding=self._encoding,
        )

    def __repr__(self) -> str:
        return '<< Route: {} {} => {!r} >>'.format(
            self._uri_template, _methods_str(self._methods), self._handler
        )
