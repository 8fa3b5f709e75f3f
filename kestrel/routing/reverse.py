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

"""Reverse routing: generating paths from URI templates.

Given the values a handler would be called with, :class:`ReverseBuilder`
substitutes each field of the handler's URI template with the matching
value, so that routing the generated path yields those same values again.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

import kestrel
from kestrel.constants import DEFAULT_ENCODING
from kestrel.errors import ParameterArityError
from kestrel.routing.converters import builtin_registry
from kestrel.routing.converters import ConverterRegistry
from kestrel.routing.template import CompiledTemplate
from kestrel.routing.template import Placeholder
from kestrel.util import uri

__all__ = ('ReverseBuilder', 'evaluate')


def evaluate(obj: Any, path: str) -> Any:
    """Evaluate a dotted property path against an object.

    Each component of `path` is looked up as a key when the current object
    is a mapping, and as an attribute otherwise. A ``None`` found anywhere
    along the way, or a missing key, yields ``None``.

    Args:
        obj: The object to start from.
        path (str): Dotted property path, e.g. ``'address.city'``. An empty
            path returns `obj` itself.

    Raises:
        AttributeError: A non-mapping object lacks one of the attributes.
    """

    if not path:
        return obj

    for attr in path.split('.'):
        if obj is None:
            return None

        if isinstance(obj, Mapping):
            obj = obj.get(attr)
        else:
            obj = getattr(obj, attr)

    return obj


def _collapse_wildcards(literal: str) -> str:
    return literal.replace('/*', '/')


def _param_name(param: Any) -> str:
    return param if isinstance(param, str) else param.name


class ReverseBuilder:
    """Generates paths from a compiled URI template.

    Instances are immutable and may be shared freely between threads.

    Args:
        compiled (CompiledTemplate): The template to fill in.

    Keyword Args:
        converters (ConverterRegistry): Registry consulted for a
            reversible converter for each value's type; values without
            one are converted with ``str()``. When omitted, a registry
            with the built-in converters is used.
        encoding (str): Character encoding used when percent-encoding the
            substituted values (default ``'utf-8'``). Must be the same
            encoding that is used to decode them when the path is routed.
    """

    __slots__ = ('_compiled', '_converters', '_encoding')

    def __init__(
        self,
        compiled: CompiledTemplate,
        converters: Optional[ConverterRegistry] = None,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        if converters is None:
            converters = builtin_registry()

        self._compiled = compiled
        self._converters = converters
        self._encoding = encoding

    def fill(self, declared_params: Sequence[Any], values: Sequence[Any]) -> str:
        """Generate a path by resolving each field against named values.

        Each field takes the value whose declared name equals the field name
        or, for dotted field names such as ``'user.id'``, equals its first
        component. The rest of a dotted name is then evaluated against the
        value. A field whose value resolves to ``None`` is replaced with an
        empty string.

        Args:
            declared_params: Names of the values, as strings or as objects
                with a ``name`` attribute such as
                :class:`~kestrel.util.misc.Parameter`.
            values: The values, aligned with `declared_params`.

        Returns:
            str: The generated path.

        Raises:
            ParameterArityError: `declared_params` and `values` differ in
                length.
        """

        if len(declared_params) != len(values):
            raise ParameterArityError(
                'declared_params must have the same length as values. '
                'Names: {!r} Values: {!r}'.format(list(declared_params), list(values))
            )

        names = [_param_name(param) for param in declared_params]

        parts = []
        for token in self._compiled.tokens:
            if isinstance(token, Placeholder):
                value = self._resolve(token.name, names, values)
                parts.append('' if value is None else self._encode(self._to_str(value)))
            else:
                parts.append(_collapse_wildcards(token))

        return ''.join(parts)

    def apply(self, values: Sequence[Any]) -> str:
        """Generate a path by filling in fields strictly in template order.

        Values are substituted verbatim, without any name resolution or
        encoding. Surplus values are ignored, and fields left without a
        value keep their original ``{...}`` form.
        """

        remaining = iter(values)

        parts = []
        for token in self._compiled.tokens:
            if isinstance(token, Placeholder):
                value = next(remaining, token.token)
                parts.append(str(value))
            else:
                parts.append(token)

        return ''.join(parts)

    def _resolve(self, name: str, names: Sequence[str], values: Sequence[Any]) -> Any:
        selected, value = self._select(name, names, values)
        if selected is None:
            return None

        return evaluate(value, name[len(selected) + 1 :])

    def _select(
        self, name: str, names: Sequence[str], values: Sequence[Any]
    ) -> Tuple[Optional[str], Any]:
        for param_name, value in zip(names, values):
            if name == param_name or name.startswith(param_name + '.'):
                return param_name, value

        return None, None

    def _to_str(self, value: Any) -> str:
        converters = self._converters
        if converters.exists_reversible_for(type(value)):
            return converters.reversible_for(type(value)).to_str(value)

        return str(value)

    def _encode(self, value: str) -> str:
        try:
            return uri.encode_value(value, encoding=self._encoding)
        except (LookupError, UnicodeEncodeError):
            kestrel._logger.warning(
                "Can't encode parameter : %s with encoding : %s",
                value,
                self._encoding,
            )
            return value
