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

from __future__ import annotations

import abc
from collections import UserDict
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Type
import uuid

__all__ = (
    'BaseConverter',
    'BoolConverter',
    'builtin_registry',
    'ConverterRegistry',
    'DateTimeConverter',
    'EnumConverter',
    'ReversibleConverter',
    'UUIDConverter',
)


# PERF: Avoid an extra namespace lookup when using this function
strptime = datetime.strptime


class BaseConverter(metaclass=abc.ABCMeta):
    """Abstract base class for URI template field converters."""

    @abc.abstractmethod
    def convert(self, value: str) -> Any:
        """Convert a URI template field value to another format or type.

        Args:
            value (str): Original string to convert.

        Returns:
            object: Converted field value, or ``None`` if the field
                can not be converted.
        """


class ReversibleConverter(BaseConverter):
    """Base class for converters that can also turn a value back into a string.

    Reversible converters are consulted during reverse routing, so that a
    value substituted into a URI template takes the same canonical form
    that :meth:`~.BaseConverter.convert` accepts.
    """

    @abc.abstractmethod
    def to_str(self, value: Any) -> str:
        """Convert a value to its canonical string form.

        Args:
            value: The value to convert.

        Returns:
            str: The string to substitute into the URI template (before
            percent-encoding).
        """


class BoolConverter(ReversibleConverter):
    """Converts a field value to a bool.

    Only the lowercase literals ``'true'`` and ``'false'`` are accepted,
    matching the default field pattern for ``bool`` arguments.
    """

    def convert(self, value: str) -> Optional[bool]:
        if value == 'true':
            return True
        if value == 'false':
            return False

        return None

    def to_str(self, value: bool) -> str:
        return 'true' if value else 'false'


class EnumConverter(ReversibleConverter):
    """Converts a field value to a member of an enum, by name.

    Args:
        enum_class (type): The :class:`~enum.Enum` subclass to convert to.
            May be omitted when the converter is only used in reverse.
    """

    __slots__ = ('_enum_class',)

    def __init__(self, enum_class: Optional[Type[Enum]] = None) -> None:
        self._enum_class = enum_class

    def convert(self, value: str) -> Optional[Enum]:
        if self._enum_class is None:
            return None

        try:
            return self._enum_class[value]
        except KeyError:
            return None

    def to_str(self, value: Enum) -> str:
        return value.name


class DateTimeConverter(ReversibleConverter):
    """Converts a field value to a datetime, and back.

    Keyword Args:
        format_string (str): String used to parse and format the field value.
            Any format recognized by strptime() is supported
            (default ``'%Y-%m-%dT%H:%M:%S%z'``).
    """

    __slots__ = ('_format_string',)

    def __init__(self, format_string: str = '%Y-%m-%dT%H:%M:%S%z') -> None:
        self._format_string = format_string

    def convert(self, value: str) -> Optional[datetime]:
        try:
            return strptime(value, self._format_string)
        except ValueError:
            return None

    def to_str(self, value: datetime) -> str:
        return value.strftime(self._format_string)


class UUIDConverter(ReversibleConverter):
    """Converts a field value to a uuid.UUID, and back.

    In order to be converted, the field value must consist of a
    string of 32 hexadecimal digits, as defined in RFC 4122, Section 3.
    Note, however, that hyphens and the URN prefix are optional. Values are
    always converted back to the canonical hyphenated form.
    """

    def convert(self, value: str) -> Optional[uuid.UUID]:
        try:
            return uuid.UUID(value)
        except ValueError:
            return None

    def to_str(self, value: uuid.UUID) -> str:
        return str(value)


class ConverterRegistry(UserDict):
    """A dict-like class mapping value types to reversible converters.

    Lookups walk the method resolution order of the requested type, so a
    converter registered for :class:`~enum.Enum` also serves every
    enumeration, while a converter registered for a subclass takes
    precedence over one registered for its base.
    """

    def __setitem__(self, tp: type, converter: ReversibleConverter) -> None:
        self._validate(tp, converter)
        UserDict.__setitem__(self, tp, converter)

    def register(self, tp: type, converter: ReversibleConverter) -> None:
        """Register a converter for a value type."""
        self[tp] = converter

    def exists_reversible_for(self, tp: type) -> bool:
        """Return ``True`` if a reversible converter is registered for `tp`."""
        return self._lookup(tp) is not None

    def reversible_for(self, tp: type) -> ReversibleConverter:
        """Return the reversible converter for `tp`.

        Raises:
            KeyError: No converter is registered for `tp` or its bases.
        """

        converter = self._lookup(tp)
        if converter is None:
            raise KeyError(tp)

        return converter

    def _lookup(self, tp: type) -> Optional[ReversibleConverter]:
        for base in getattr(tp, '__mro__', (tp,)):
            converter = self.data.get(base)
            if converter is not None:
                return converter

        return None

    def _validate(self, tp: type, converter: ReversibleConverter) -> None:
        if not isinstance(tp, type):
            raise TypeError('Converters may only be registered for types.')
        if not isinstance(converter, ReversibleConverter):
            raise TypeError(
                'Only instances of ReversibleConverter may be registered '
                '({!r} is not).'.format(converter)
            )


BUILTIN = (
    (bool, BoolConverter),
    (Enum, EnumConverter),
    (datetime, DateTimeConverter),
    (uuid.UUID, UUIDConverter),
)


def builtin_registry() -> ConverterRegistry:
    """Return a new registry preloaded with the built-in converters."""
    return ConverterRegistry((tp, converter()) for tp, converter in BUILTIN)
