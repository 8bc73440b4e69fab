# tests/conftest.py
import pytest

from utils.books import BookRegistry
from utils.fuzzy import BookMatcher
from utils.reference_parser import ReferenceParser

SAMPLE_EN = {
    '1001001': 'In the beginning God created the heavens and the earth.',
    '43003016': 'For God loved the world so much that he gave his only-begotten Son.',
    '43003017': 'For God did not send his Son into the world for him to judge the world.',
    '46013004': 'Love is patient and kind.',
    '46013005': 'It does not behave indecently.',
    '46013006': 'It does not rejoice over unrighteousness.',
    '46013007': 'It bears all things.',
}

SAMPLE_DA = {
    '1001001': 'I begyndelsen skabte Gud himlene og jorden.',
    '43003016': 'For Gud elskede verden så højt at han gav sin enestefødte søn.',
}


@pytest.fixture
def registry():
    return BookRegistry()


@pytest.fixture
def parser(registry):
    return ReferenceParser(registry, BookMatcher(registry))


@pytest.fixture
def datasets():
    return {'en': dict(SAMPLE_EN), 'da': dict(SAMPLE_DA)}
