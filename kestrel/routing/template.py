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

"""URI template compiler and path matcher.

A URI template is made up of literal text and field expressions::

    /users/{id}                     any text except '/' (or an inferred
                                    pattern, see below)
    /users/{id:[0-9]{4}}            an explicit regular expression
    /files/{path*}                  the remainder of the path, slashes
                                    included
    /static/*                       shorthand for any trailing text

Each template is compiled once into a single regular expression that must
match the whole path. Every field becomes its own capture group, in
document order, so that the captured values line up with
:attr:`CompiledTemplate.param_names`.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, List, Mapping, NamedTuple, Optional, Tuple, Union

import kestrel
from kestrel.errors import MalformedTemplateError
from kestrel.routing.inference import regex_for

__all__ = ('CompiledTemplate', 'Placeholder', 'compile_template', 'field_names')

# NOTE: The first branch handles field expressions whose regular
#   expression contains a (single level of) braces, such as
#   '{id:[0-9]{4}}', by consuming up to the second closing brace. The
#   second branch handles everything else, up to the first closing brace.
_FIELD_PATTERN = re.compile(r'\{((?=[^{]+?\{)[^}]+?\}|[^}]+?)\}')

_WILDCARD_SHORTHAND = '/*'
_WILDCARD_PATTERN = '.*'
_DEFAULT_PATTERN = '[^/]*'


class Placeholder(NamedTuple):
    """A field expression found in a URI template.

    Attributes:
        token (str): The field expression as written, braces included.
        name (str): Bare field name, without any pattern or wildcard suffix.
        pattern (str): The regular expression the field is matched with.
        wildcard (bool): ``True`` for ``{name*}`` fields.
    """

    token: str
    name: str
    pattern: str
    wildcard: bool = False


def _split_field(template: str, content: str) -> Tuple[str, Optional[str], bool]:
    name, sep, regex = content.partition(':')
    wildcard = False

    if sep:
        if not regex:
            raise MalformedTemplateError(
                template, 'empty pattern for field "{}"'.format(name)
            )
    else:
        regex = None
        if name.endswith('*'):
            name = name[:-1]
            wildcard = True

    if not name:
        raise MalformedTemplateError(
            template, 'field expression "{{{}}}" has no name'.format(content)
        )
    if '{' in name or '}' in name:
        raise MalformedTemplateError(
            template, 'field name "{}" contains a brace'.format(name)
        )

    return name, regex, wildcard


def _compile_literal(template: str, literal: str) -> str:
    if '{}' in literal:
        raise MalformedTemplateError(template, 'empty field expression "{}"')
    if '{' in literal or '}' in literal:
        raise MalformedTemplateError(template, 'unbalanced braces')

    # NOTE: Literal text must match exactly, except for the '/*' shorthand.
    return ('/' + _WILDCARD_PATTERN).join(
        re.escape(part) for part in literal.split(_WILDCARD_SHORTHAND)
    )


def _group_name(index: int) -> str:
    return '_p{}'.format(index)


class CompiledTemplate:
    """A URI template compiled into a regular expression.

    Instances are immutable and may be shared freely between threads.

    Attributes:
        template (str): The URI template this instance was compiled from.
        regex: The compiled :class:`re.Pattern` matched against whole paths.
        param_names (tuple): Bare field names in document order. The i-th
            name corresponds to the i-th capture returned by
            :meth:`extract`.
        parameter_patterns (Mapping): Read-only mapping of field names to
            the regular expressions they were matched with.
        tokens (tuple): The template split into literal strings and
            :class:`Placeholder` items, in document order.
    """

    __slots__ = ('template', 'regex', 'param_names', 'parameter_patterns', 'tokens')

    def __init__(
        self,
        template: str,
        regex: re.Pattern,
        param_names: Tuple[str, ...],
        parameter_patterns: Mapping[str, str],
        tokens: Tuple[Union[str, Placeholder], ...],
    ) -> None:
        self.template = template
        self.regex = regex
        self.param_names = param_names
        self.parameter_patterns = parameter_patterns
        self.tokens = tokens

    @property
    def placeholders(self) -> Tuple[Placeholder, ...]:
        """The :class:`Placeholder` tokens of the template, in document order."""
        return tuple(token for token in self.tokens if isinstance(token, Placeholder))

    def matches(self, path: str) -> bool:
        """Return ``True`` if the whole `path` matches the template."""
        return self.regex.fullmatch(path) is not None

    def extract(self, path: str) -> List[str]:
        """Extract the raw (still percent-encoded) field values from a path.

        Args:
            path (str): The requested path.

        Returns:
            list: One string per field, aligned with :attr:`param_names`, or
            an empty list if `path` does not match the template.
        """

        match = self.regex.fullmatch(path)
        if match is None:
            return []

        return [match.group(_group_name(i)) for i in range(len(self.param_names))]

    def __repr__(self) -> str:
        return '<{}: {!r} -> {!r}>'.format(
            type(self).__name__, self.template, self.regex.pattern
        )


def compile_template(
    template: str,
    parameter_patterns: Optional[Mapping[str, str]] = None,
    param_types: Optional[Mapping[str, Any]] = None,
) -> CompiledTemplate:
    """Compile a URI template.

    The regular expression for each field is chosen as follows, the first
    rule that applies wins:

    1. The pattern configured for the field name in `parameter_patterns`.
    2. ``.*`` for wildcard fields (``{name*}``).
    3. The pattern given in the field expression (``{name:pattern}``).
    4. The pattern inferred from the field's type in `param_types`.
    5. ``[^/]*``.

    Args:
        template (str): The URI template to compile.

    Keyword Args:
        parameter_patterns (Mapping): Explicit regular expressions, keyed
            by bare field name.
        param_types (Mapping): Declared types, keyed by bare field name,
            used to infer a pattern for fields without an explicit one.

    Returns:
        CompiledTemplate: The compiled template.

    Raises:
        MalformedTemplateError: The template has unbalanced braces or an
            empty field expression, or a field pattern is not a valid
            regular expression.
    """

    if not isinstance(template, str):
        raise MalformedTemplateError(repr(template), 'the template must be a string')

    explicit = dict(parameter_patterns or {})
    param_types = param_types or {}

    tokens: List[Union[str, Placeholder]] = []
    param_names = []
    resolved = {}
    regex_parts = []

    pos = 0
    for index, field in enumerate(_FIELD_PATTERN.finditer(template)):
        literal = template[pos : field.start()]
        regex_parts.append(_compile_literal(template, literal))
        if literal:
            tokens.append(literal)

        name, regex, wildcard = _split_field(template, field.group(1))

        if name in explicit:
            pattern = explicit[name]
        elif wildcard:
            pattern = _WILDCARD_PATTERN
        elif regex is not None:
            pattern = regex
        elif param_types.get(name) is not None:
            pattern = regex_for(param_types[name])
        else:
            pattern = _DEFAULT_PATTERN

        resolved[name] = pattern
        param_names.append(name)
        tokens.append(Placeholder(field.group(0), name, pattern, wildcard))
        regex_parts.append('(?P<{}>{})'.format(_group_name(index), pattern))

        pos = field.end()

    literal = template[pos:]
    regex_parts.append(_compile_literal(template, literal))
    if literal:
        tokens.append(literal)

    try:
        compiled = re.compile(''.join(regex_parts))
    except re.error as ex:
        raise MalformedTemplateError(
            template, 'invalid field pattern ({})'.format(ex)
        ) from ex

    # NOTE: A wildcard field is greedy, so any text or fields after it only
    #   receive what is left over at the end of the path.
    for token in tokens[:-1]:
        if isinstance(token, Placeholder) and token.wildcard:
            kestrel._logger.warning(
                'Wildcard field "%s" in URI template %s is not at the end '
                'of the template',
                token.name,
                template,
            )

    kestrel._logger.debug(
        'For %s retrieved %s with %s', template, compiled.pattern, resolved
    )

    return CompiledTemplate(
        template,
        compiled,
        tuple(param_names),
        MappingProxyType(resolved),
        tuple(tokens),
    )


def field_names(template: str) -> List[str]:
    """Return the bare field names of a URI template, in document order.

    Raises:
        MalformedTemplateError: A field expression is empty.
    """

    if not isinstance(template, str):
        raise MalformedTemplateError(repr(template), 'the template must be a string')

    return [
        _split_field(template, field.group(1))[0]
        for field in _FIELD_PATTERN.finditer(template)
    ]
