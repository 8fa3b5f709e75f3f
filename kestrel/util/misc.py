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

"""Miscellaneous utilities.

This module provides helper utilities for introspecting the parameters
declared by route handlers.
"""

from __future__ import annotations

import inspect
import types
import typing
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

__all__ = (
    'Parameter',
    'get_declared_params',
    'resolve_param_type',
    'unwrap_optional',
)

_UNION_TYPES: tuple = (typing.Union,)
if hasattr(types, 'UnionType'):
    _UNION_TYPES += (types.UnionType,)


class Parameter(NamedTuple):
    """A formal argument declared by a route handler.

    Attributes:
        name (str): Name of the argument.
        type: Annotated type of the argument, or ``None`` if the argument
            is not annotated.
    """

    name: str
    type: Optional[Any] = None


def _get_type_hints(obj: Any) -> dict:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        # NOTE: Forward references that can not be resolved in the
        #   namespace of obj, or an object that does not carry
        #   annotations at all (e.g., a callable instance).
        return {}


def unwrap_optional(tp: Any) -> Any:
    """Return ``X`` for ``Optional[X]`` (or ``X | None``), otherwise `tp`."""

    if typing.get_origin(tp) in _UNION_TYPES:
        args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]

    return tp


def get_declared_params(func: Callable[..., Any]) -> List[Parameter]:
    """Introspect the arguments of a callable, together with their types.

    Args:
        func: The callable to introspect

    Returns:
        A list of :class:`Parameter` tuples in declaration order, excluding
        ``self``, *args and **kwargs arguments. Annotations are resolved
        with :func:`typing.get_type_hints` when possible; unresolvable
        string annotations are reported as ``None``.
    """

    sig = inspect.signature(func)
    hints = _get_type_hints(func)

    params = []
    for param in sig.parameters.values():
        if param.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            continue

        tp = hints.get(param.name)
        if tp is None and param.annotation is not inspect.Parameter.empty:
            if not isinstance(param.annotation, str):
                tp = param.annotation

        params.append(Parameter(param.name, tp))

    # NOTE: Unbound functions defined on a class still list 'self'.
    if params and params[0].name == 'self':
        params = params[1:]

    return params


def resolve_param_type(params: Sequence[Parameter], name: str) -> Optional[Any]:
    """Resolve the type of a possibly dotted parameter name.

    The first component of `name` selects one of `params`; any further
    components are looked up in the annotations of the previous type, so
    that ``'user.id'`` resolves to ``int`` for a ``user: User`` argument
    whose class declares ``id: int``.

    Returns:
        The resolved type, or ``None`` if any component can not be
        resolved.
    """

    head, __, rest = name.partition('.')

    for param in params:
        if param.name == head:
            tp = param.type
            break
    else:
        return None

    if not rest:
        return tp

    for attr in rest.split('.'):
        tp = unwrap_optional(tp)
        if not isinstance(tp, type):
            return None

        tp = _get_type_hints(tp).get(attr)
        if tp is None:
            return None

    return tp
