import logging

import pytest

from i18n_report.extract import Extractor
from i18n_report.options import vue_i18n_options


def extract(filename, src, options=None, file_type=None):
    extractor = Extractor(options or vue_i18n_options())
    extractor.extract_source(filename, src, file_type)
    return extractor


def found(extractor):
    """(identifier, line) of every record, in extraction order."""
    return [(r.identifier, r.source_line) for r in extractor.records]


@pytest.fixture
def extractor():
    return Extractor(vue_i18n_options())


@pytest.fixture(autouse=True)
def reset_logging():
    # the CLI attaches a handler bound to the runner's stream
    yield
    package_log = logging.getLogger("i18n_report")
    for handler in package_log.handlers[:]:
        package_log.removeHandler(handler)
    package_log.setLevel(logging.NOTSET)
