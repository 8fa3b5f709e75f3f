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

"""Default field patterns inferred from declared parameter types.

When a URI template field neither carries its own regular expression nor
has one configured explicitly, the router derives one from the type of the
handler argument that receives the field. The type is first classified
into one of a closed set of kinds, and each kind maps to a fixed pattern::

    >>> regex_for(int)
    '-?\\d+'
    >>> regex_for(Color)  # class Color(Enum): RED = 1; GREEN = 2
    'RED|GREEN'
"""

from __future__ import annotations

import decimal
from enum import Enum
import re
from typing import Any, NamedTuple, NewType, Tuple

from kestrel.util.misc import unwrap_optional

__all__ = (
    'Char',
    'ParamKind',
    'TypeClass',
    'classify',
    'pattern_for',
    'regex_for',
)


Char = NewType('Char', str)
"""Annotation for handler arguments that receive exactly one character."""


class ParamKind(Enum):
    """Kinds of parameter types that have a default field pattern."""

    INTEGER = 'integer'
    CHARACTER = 'character'
    DECIMAL = 'decimal'
    BOOLEAN = 'boolean'
    ENUMERATED = 'enumerated'
    OTHER = 'other'


class TypeClass(NamedTuple):
    """Classification of a parameter type.

    Attributes:
        kind (ParamKind): The kind of the type.
        members (tuple): Member names, in definition order, when `kind` is
            ``ParamKind.ENUMERATED``; otherwise empty.
    """

    kind: ParamKind
    members: Tuple[str, ...] = ()


# NOTE: Membership is checked by identity rather than with issubclass()
#   since bool is a subclass of int, and IntEnum members are ints as well.
_INTEGER_TYPES = (int,)
_CHARACTER_TYPES = (Char,)
_DECIMAL_TYPES = (float, decimal.Decimal)
_BOOLEAN_TYPES = (bool,)

_PATTERNS = {
    ParamKind.INTEGER: r'-?\d+',
    ParamKind.CHARACTER: r'.',
    ParamKind.DECIMAL: r'-?\d*\.?\d+',
    ParamKind.BOOLEAN: r'true|false',
    ParamKind.OTHER: r'[^/]+',
}

_NEVER_PATTERN = r'(?!)'


def _is_one_of(tp: Any, types: tuple) -> bool:
    return any(tp is candidate for candidate in types)


def classify(tp: Any) -> TypeClass:
    """Classify a parameter type.

    ``Optional[X]`` is classified as ``X``. Anything that is not one of the
    recognized types, including ``None`` for unannotated arguments, is
    classified as ``ParamKind.OTHER``.
    """

    tp = unwrap_optional(tp)

    if _is_one_of(tp, _INTEGER_TYPES):
        return TypeClass(ParamKind.INTEGER)
    if _is_one_of(tp, _CHARACTER_TYPES):
        return TypeClass(ParamKind.CHARACTER)
    if _is_one_of(tp, _DECIMAL_TYPES):
        return TypeClass(ParamKind.DECIMAL)
    if _is_one_of(tp, _BOOLEAN_TYPES):
        return TypeClass(ParamKind.BOOLEAN)
    if isinstance(tp, type) and issubclass(tp, Enum):
        return TypeClass(ParamKind.ENUMERATED, tuple(member.name for member in tp))

    return TypeClass(ParamKind.OTHER)


def pattern_for(type_class: TypeClass) -> str:
    """Return the default field pattern for a classified type."""

    if type_class.kind is ParamKind.ENUMERATED:
        if not type_class.members:
            # NOTE: An enumeration without members has no valid value.
            return _NEVER_PATTERN

        return '|'.join(re.escape(name) for name in type_class.members)

    return _PATTERNS[type_class.kind]


def regex_for(tp: Any) -> str:
    """Return the default field pattern for a parameter type."""

    return pattern_for(classify(tp))
