import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from stampdesk.config import StamperSettings
from tests.helpers import BLUE, RED, make_kind, make_pdf_bytes


@pytest.fixture
def settings():
    return StamperSettings(history_limit=None)


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes()


@pytest.fixture
def red_kind():
    return make_kind("red", RED)


@pytest.fixture
def blue_kind():
    return make_kind("blue", BLUE)
