from datetime import datetime
from datetime import timezone
import enum
import uuid

import pytest

from kestrel.routing import converters


_TEST_UUID = uuid.uuid4()
_TEST_UUID_STR = str(_TEST_UUID)
_TEST_UUID_STR_SANS_HYPHENS = _TEST_UUID_STR.replace('-', '')


class Color(enum.Enum):
    RED = 1
    GREEN = 2


class Size(enum.IntEnum):
    SMALL = 1


class Money:
    def __init__(self, cents):
        self.cents = cents


class MoneyConverter(converters.ReversibleConverter):
    def convert(self, value):
        return Money(int(value))

    def to_str(self, value):
        return '{:.2f}'.format(value.cents / 100)


class OneWayConverter(converters.BaseConverter):
    def convert(self, value):
        return value


@pytest.mark.parametrize('value, expected', [
    ('true', True),
    ('false', False),
    ('True', None),
    ('1', None),
    ('', None),
])
def test_bool_converter(value, expected):
    c = converters.BoolConverter()
    assert c.convert(value) is expected


def test_bool_converter_to_str():
    c = converters.BoolConverter()
    assert c.to_str(True) == 'true'
    assert c.to_str(False) == 'false'


@pytest.mark.parametrize('value, expected', [
    ('RED', Color.RED),
    ('GREEN', Color.GREEN),
    ('red', None),
    ('BLUE', None),
])
def test_enum_converter(value, expected):
    c = converters.EnumConverter(Color)
    assert c.convert(value) is expected


def test_enum_converter_to_str():
    c = converters.EnumConverter()

    assert c.to_str(Color.GREEN) == 'GREEN'
    assert c.to_str(Size.SMALL) == 'SMALL'
    assert c.convert('GREEN') is None


@pytest.mark.parametrize('value, format_string, expected', [
    ('07-03-17', '%m-%d-%y', datetime(2017, 7, 3)),
    ('2017-07-03T14:30:01Z', '%Y-%m-%dT%H:%M:%SZ', datetime(2017, 7, 3, 14, 30, 1)),
    ('2017_19', '%Y_%H', datetime(2017, 1, 1, 19, 0)),

    ('2017-07-03T14:30:01', '%Y-%m-%dT%H:%M:%SZ', None),
    ('07-03-17 ', '%m-%d-%y', None),
])
def test_datetime_converter(value, format_string, expected):
    c = converters.DateTimeConverter(format_string)
    assert c.convert(value) == expected


def test_datetime_converter_default_format():
    c = converters.DateTimeConverter()
    dt = datetime(2017, 7, 3, 14, 30, 1, tzinfo=timezone.utc)

    assert c.convert('2017-07-03T14:30:01Z') == dt
    assert c.to_str(dt) == '2017-07-03T14:30:01+0000'
    assert c.convert(c.to_str(dt)) == dt


@pytest.mark.parametrize('value, expected', [
    (_TEST_UUID_STR, _TEST_UUID),
    (_TEST_UUID_STR_SANS_HYPHENS, _TEST_UUID),
    ('urn:uuid:' + _TEST_UUID_STR, _TEST_UUID),

    (' ', None),
    (_TEST_UUID_STR[:-1], None),
    (_TEST_UUID_STR[:-1] + 'g', None),
])
def test_uuid_converter(value, expected):
    c = converters.UUIDConverter()
    assert c.convert(value) == expected


def test_uuid_converter_to_str():
    c = converters.UUIDConverter()
    assert c.to_str(_TEST_UUID) == _TEST_UUID_STR


def test_registry_builtins(registry):
    assert registry.exists_reversible_for(bool)
    assert registry.exists_reversible_for(Color)
    assert registry.exists_reversible_for(Size)
    assert registry.exists_reversible_for(datetime)
    assert registry.exists_reversible_for(uuid.UUID)

    assert not registry.exists_reversible_for(int)
    assert not registry.exists_reversible_for(str)
    assert not registry.exists_reversible_for(Money)


def test_registry_mro_lookup(registry):
    assert isinstance(registry.reversible_for(Color), converters.EnumConverter)
    assert isinstance(registry.reversible_for(bool), converters.BoolConverter)


def test_registry_missing(registry):
    with pytest.raises(KeyError):
        registry.reversible_for(Money)


def test_registry_register(registry):
    registry.register(Money, MoneyConverter())

    assert registry.exists_reversible_for(Money)
    assert registry.reversible_for(Money).to_str(Money(1250)) == '12.50'


def test_registry_subclass_takes_precedence(registry):
    class Shouting(converters.EnumConverter):
        def to_str(self, value):
            return value.name + '!'

    registry[Color] = Shouting()

    assert registry.reversible_for(Color).to_str(Color.RED) == 'RED!'
    assert registry.reversible_for(Size).to_str(Size.SMALL) == 'SMALL'


def test_registry_rejects_one_way_converters():
    registry = converters.ConverterRegistry()

    with pytest.raises(TypeError):
        registry[str] = OneWayConverter()

    with pytest.raises(TypeError):
        registry.update({str: OneWayConverter()})


def test_registry_rejects_non_types():
    registry = converters.ConverterRegistry()

    with pytest.raises(TypeError):
        registry['money'] = MoneyConverter()


def test_builtin_registry_is_not_shared():
    first = converters.builtin_registry()
    second = converters.builtin_registry()

    first[Money] = MoneyConverter()

    assert first.exists_reversible_for(Money)
    assert not second.exists_reversible_for(Money)
    assert second.exists_reversible_for(bool)
    assert isinstance(second.reversible_for(uuid.UUID), converters.UUIDConverter)
