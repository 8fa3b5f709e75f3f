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

"""Binding of captured path fields to request parameters."""

from __future__ import annotations

from typing import Dict, Protocol, Sequence

import kestrel
from kestrel.constants import DEFAULT_ENCODING
from kestrel.util import uri

__all__ = ('BindResult', 'ParamDict', 'ParamSink', 'bind')


class ParamSink(Protocol):
    """Receives the parameters bound from a request path."""

    def set_param(self, name: str, value: str) -> None: ...


class ParamDict(dict):
    """A plain dict that can be used as a :class:`ParamSink`."""

    def set_param(self, name: str, value: str) -> None:
        self[name] = value


class BindResult:
    """Outcome of binding the fields captured from a path.

    Decoding a field may fail, e.g. because of a malformed percent-escape.
    Such a field is left unbound, and the error is reported here rather than
    raised, so that the remaining fields are still bound.

    Attributes:
        params (dict): Decoded values of the fields that were bound, keyed
            by field name, in template order.
        failures (dict): The exception raised while decoding each field that
            could not be bound, keyed by field name.
    """

    __slots__ = ('params', 'failures')

    def __init__(self) -> None:
        self.params: Dict[str, str] = {}
        self.failures: Dict[str, Exception] = {}

    @property
    def ok(self) -> bool:
        """``True`` if every field was bound."""
        return not self.failures

    def __repr__(self) -> str:
        return '<BindResult: params={!r} failures={!r}>'.format(
            self.params, sorted(self.failures)
        )


def bind(
    captures: Sequence[str],
    names: Sequence[str],
    sink: ParamSink,
    encoding: str = DEFAULT_ENCODING,
) -> BindResult:
    """Decode captured field values and write them to a parameter sink.

    Args:
        captures: Raw field values, as returned by
            :meth:`~kestrel.routing.template.CompiledTemplate.extract`.
        names: Field names aligned with `captures`.
        sink: Object receiving each decoded value through
            ``set_param(name, value)``.

    Keyword Args:
        encoding (str): Character encoding of the percent-encoded values
            (default ``'utf-8'``).

    Returns:
        BindResult: The bound values and any decoding failures.
    """

    if len(captures) != len(names):
        raise ValueError(
            'captures and names must have the same length '
            '({} != {})'.format(len(captures), len(names))
        )

    result = BindResult()

    for name, raw in zip(names, captures):
        try:
            value = uri.decode(raw, encoding=encoding, strict=True)
        except (ValueError, LookupError) as ex:
            kestrel._logger.error(
                'Error when decoding url parameter %s=%r with encoding %s: %s',
                name,
                raw,
                encoding,
                ex,
            )
            result.failures[name] = ex
            continue

        sink.set_param(name, value)
        result.params[name] = value

    return result
