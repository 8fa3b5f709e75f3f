import pytest

from kestrel.util import uri


@pytest.mark.parametrize('value, expected', [
    ('abcXYZ019-._~', 'abcXYZ019-._~'),
    ('a b', 'a%20b'),
    ('a/b', 'a%2Fb'),
    ('a+b', 'a%2Bb'),
    ('100%', '100%25'),
    ('?x=1&y=2', '%3Fx%3D1%26y%3D2'),
    ('$1', '%241'),
    ('é', '%C3%A9'),
])
def test_encode_value(value, expected):
    assert uri.encode_value(value) == expected


def test_encode_value_with_encoding():
    assert uri.encode_value('é', encoding='latin-1') == '%E9'
    assert uri.encode_value('café', encoding='utf-8') == 'caf%C3%A9'


def test_encode_value_unknown_encoding():
    with pytest.raises(LookupError):
        uri.encode_value('a b', encoding='no-such-encoding')


def test_encode_value_unencodable_character():
    with pytest.raises(UnicodeEncodeError):
        uri.encode_value('€', encoding='latin-1')


@pytest.mark.parametrize('encoded, expected', [
    ('plain', 'plain'),
    ('a+b', 'a b'),
    ('a%20b', 'a b'),
    ('a%2Fb', 'a/b'),
    ('a%2bb', 'a+b'),
    ('%C3%A9', 'é'),
    ('%24%31', '$1'),
])
def test_decode(encoded, expected):
    assert uri.decode(encoded) == expected
    assert uri.decode(encoded, strict=True) == expected


def test_decode_retains_plus():
    assert uri.decode('a+b%20c', unquote_plus=False) == 'a+b c'


@pytest.mark.parametrize('encoded', ['%zz', 'abc%', 'abc%4', '%%'])
def test_decode_malformed_escape(encoded):
    assert uri.decode(encoded) == encoded

    with pytest.raises(ValueError):
        uri.decode(encoded, strict=True)


def test_decode_with_encoding():
    assert uri.decode('%E9', encoding='latin-1') == 'é'
    assert uri.decode('%E9') == '�'

    with pytest.raises(UnicodeDecodeError):
        uri.decode('%E9', strict=True)


def test_decode_unknown_encoding():
    # NOTE: Nothing to decode, so the encoding is never looked up
    assert uri.decode('a+b', encoding='no-such-encoding') == 'a b'

    with pytest.raises(LookupError):
        uri.decode('a%20b', encoding='no-such-encoding')


@pytest.mark.parametrize('encoding', ['utf-8', 'latin-1', 'cp1252'])
@pytest.mark.parametrize('value', ['plain', 'with space', 'ünïcødé', 'x/y+z%'])
def test_encode_decode_inverse(value, encoding):
    encoded = uri.encode_value(value, encoding=encoding)
    assert uri.decode(encoded, encoding=encoding, strict=True) == value
