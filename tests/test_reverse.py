from datetime import datetime
from datetime import timezone
import enum
import logging
import uuid

import pytest

from kestrel import compile_template
from kestrel import ParameterArityError
from kestrel import RouterOptions
from kestrel.routing.converters import ConverterRegistry
from kestrel.routing.params import bind
from kestrel.routing.params import ParamDict
from kestrel.routing.reverse import evaluate
from kestrel.routing.reverse import ReverseBuilder
from kestrel.util.misc import Parameter


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Address:
    def __init__(self, city):
        self.city = city


class User:
    def __init__(self, id, address=None):
        self.id = id
        self.address = address


def builder_for(template, **kwargs):
    return ReverseBuilder(compile_template(template), **kwargs)


@pytest.fixture
def converting_builder():
    registry = RouterOptions().converters

    def factory(template):
        return ReverseBuilder(compile_template(template), converters=registry)

    return factory


def test_fill():
    builder = builder_for('/item/{id}')
    assert builder.fill([Parameter('id', int)], [5]) == '/item/5'


def test_fill_accepts_plain_names():
    builder = builder_for('/repos/{org}/{repo}')
    assert builder.fill(['repo', 'org'], ['kestrel', 'falcon']) == '/repos/falcon/kestrel'


def test_fill_nested_property():
    builder = builder_for('/users/{user.id}/{tab}')
    assert builder.fill(['user', 'tab'], [User(7), 'posts']) == '/users/7/posts'


def test_fill_deeply_nested_property():
    builder = builder_for('/cities/{user.address.city}')
    user = User(1, Address('Porto Alegre'))

    assert builder.fill(['user'], [user]) == '/cities/Porto%20Alegre'


def test_fill_nested_mapping():
    builder = builder_for('/users/{user.id}')
    assert builder.fill(['user'], [{'id': 3}]) == '/users/3'


def test_fill_selects_by_dotted_prefix_only():
    names = ['username', 'user']
    values = ['bob', User(9)]

    assert builder_for('/u/{user.id}').fill(names, values) == '/u/9'
    assert builder_for('/u/{username}').fill(names, values) == '/u/bob'


def test_fill_value_used_for_each_occurrence():
    builder = builder_for('/{a}/{b}/{a}')
    assert builder.fill(['a', 'b'], ['x', 'y']) == '/x/y/x'


@pytest.mark.parametrize('template, names, values, expected', [
    ('/item/{id}', ['id'], [None], '/item/'),
    ('/users/{user.id}', ['user'], [None], '/users/'),
    ('/users/{user.id}', ['user'], [User(None)], '/users/'),
    ('/users/{user.id}', ['user'], [{}], '/users/'),
    ('/item/{id}', ['other'], ['x'], '/item/'),
    ('/item/{id}', [], [], '/item/'),
])
def test_fill_none_is_empty(template, names, values, expected):
    path = builder_for(template).fill(names, values)

    assert path == expected
    assert 'None' not in path


def test_fill_missing_attribute():
    builder = builder_for('/users/{user.name}')

    with pytest.raises(AttributeError):
        builder.fill(['user'], [User(1)])


@pytest.mark.parametrize('value, expected', [
    ('a b', 'a%20b'),
    ('a/b', 'a%2Fb'),
    ('a+b', 'a%2Bb'),
    ('100%', '100%25'),
    ('é', '%C3%A9'),
    ('$1', '%241'),
])
def test_fill_encodes(value, expected):
    builder = builder_for('/q/{term}')
    assert builder.fill(['term'], [value]) == '/q/' + expected


def test_fill_with_encoding():
    builder = builder_for('/q/{term}', encoding='latin-1')
    assert builder.fill(['term'], ['café']) == '/q/caf%E9'


@pytest.mark.parametrize('encoding, value', [
    ('no-such-encoding', 'a b'),
    ('ascii', 'café'),
])
def test_fill_encoding_failure(kestrel_log, encoding, value):
    builder = builder_for('/q/{term}', encoding=encoding)

    assert builder.fill(['term'], [value]) == '/q/' + value

    warnings = [r for r in kestrel_log.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert encoding in warnings[0].getMessage()


def test_fill_uses_builtin_converters_by_default():
    builder = builder_for('/flags/{on}/{color}')
    assert builder.fill(['on', 'color'], [True, Color.RED]) == '/flags/true/RED'


def test_fill_with_empty_registry():
    builder = builder_for('/flags/{on}/{color}', converters=ConverterRegistry())
    assert builder.fill(['on', 'color'], [True, Color.RED]) == '/flags/True/Color.RED'


@pytest.mark.parametrize('value, expected', [
    (True, 'true'),
    (False, 'false'),
    (Color.GREEN, 'GREEN'),
    (uuid.UUID('12345678123456781234567812345678'), '12345678-1234-5678-1234-567812345678'),
    (datetime(2017, 7, 3, 14, 30, 1, tzinfo=timezone.utc), '2017-07-03T14%3A30%3A01%2B0000'),
    (42, '42'),
    (-1.5, '-1.5'),
])
def test_fill_with_converters(converting_builder, value, expected):
    builder = converting_builder('/v/{value}')
    assert builder.fill(['value'], [value]) == '/v/' + expected


def test_fill_collapses_wildcards():
    assert builder_for('/static/*').fill([], []) == '/static/'
    assert builder_for('/files/{path*}').fill(['path'], ['a/b']) == '/files/a%2Fb'
    assert builder_for('/files/{path*}/*').fill(['path'], ['x']) == '/files/x/'


@pytest.mark.parametrize('template, names, values, expected', [
    ('/a.*', [], [], '/a.*'),
    ('/files/{name}.*', ['name'], ['x'], '/files/x.*'),
    ('/v1.*/{name}', ['name'], ['x'], '/v1.*/x'),
])
def test_fill_keeps_literal_dot_star(template, names, values, expected):
    compiled = compile_template(template)

    path = ReverseBuilder(compiled).fill(names, values)

    assert path == expected
    assert compiled.matches(path)


def test_fill_keeps_literal_text():
    builder = builder_for(r'/archive/{year:\d{4}}.json')
    assert builder.fill(['year'], [2024]) == '/archive/2024.json'


@pytest.mark.parametrize('names, values', [
    (['a'], []),
    ([], [1]),
    (['a', 'b'], [1]),
])
def test_fill_arity_mismatch(names, values):
    builder = builder_for('/x/{a}')

    with pytest.raises(ParameterArityError):
        builder.fill(names, values)

    with pytest.raises(ValueError):
        builder.fill(names, values)


@pytest.mark.parametrize('template, values, expected', [
    ('/item/{id}', ['5'], '/item/5'),
    ('/item/{id}', ['$1'], '/item/$1'),
    ('/item/{id}', [r'\1'], r'/item/\1'),
    ('/item/{id}', [r'\g<0>'], r'/item/\g<0>'),
    ('/item/{id}', ['a b'], '/item/a b'),
    ('/item/{id}', [7], '/item/7'),
    ('/a/{x}/{y}', ['1'], '/a/1/{y}'),
    ('/a/{x}/{y}', ['1', '2', '3'], '/a/1/2'),
    (r'/a/{x:\d+}/{y*}', ['1', 'b/c'], '/a/1/b/c'),
    ('/a/{x}/*', ['1'], '/a/1/*'),
    ('/static', [], '/static'),
])
def test_apply(template, values, expected):
    assert builder_for(template).apply(values) == expected


@pytest.mark.parametrize('value', [
    'plain',
    'with space',
    'slash/inside',
    'percent%25',
    'plus+sign',
    'ünïcødé',
    '$1',
    '?query&x=1',
    '',
])
@pytest.mark.parametrize('encoding', ['utf-8', 'latin-1'])
def test_fill_then_match_round_trip(value, encoding):
    compiled = compile_template('/a/{first}/b/{second}')
    builder = ReverseBuilder(compiled, encoding=encoding)

    path = builder.fill(['first', 'second'], [value, 'fixed'])
    assert compiled.matches(path)

    sink = ParamDict()
    result = bind(compiled.extract(path), compiled.param_names, sink, encoding=encoding)

    assert result.ok
    assert sink == {'first': value, 'second': 'fixed'}


def test_evaluate():
    user = User(1, Address('Recife'))

    assert evaluate(user, '') is user
    assert evaluate(user, 'id') == 1
    assert evaluate(user, 'address.city') == 'Recife'
    assert evaluate({'a': {'b': 2}}, 'a.b') == 2
    assert evaluate({'a': None}, 'a.b') is None
    assert evaluate({}, 'a') is None
    assert evaluate(None, 'a') is None

    with pytest.raises(AttributeError):
        evaluate(user, 'missing')
