import logging

import pytest

import kestrel


@pytest.fixture
def router():
    return kestrel.Router()


@pytest.fixture
def registry():
    return kestrel.RouterOptions().converters


@pytest.fixture
def kestrel_log(caplog):
    caplog.set_level(logging.DEBUG, logger='kestrel')
    return caplog
