import logging
import os
from dataclasses import dataclass
from typing import List

from .catalog import MessageCatalog
from .diagnostics import Diagnostics
from .message import ExtractionRecord
from .options import vue_i18n_options
from .parser import entry_points, file_types, parsers


log = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    records: List[ExtractionRecord]
    catalog: MessageCatalog
    diagnostics: Diagnostics


def file_type_of(filename):
    return file_types.get(os.path.splitext(filename)[1].lower())


class Extractor:
    """
    One extraction pass. Owns the catalog and the ordered list of records,
    and hands itself to every parser so nested regions (a <script> inside a
    template, the blocks of a .vue file) land in the same pass.
    """

    def __init__(self, options=None, diagnostics=None, domain="messages"):
        self.options = options if options is not None else vue_i18n_options()
        self.diagnostics = (diagnostics if diagnostics is not None
                            else Diagnostics())
        self.catalog = MessageCatalog(domain)
        self.records: List[ExtractionRecord] = []
        self._parsers = {}

    def parser(self, name):
        if name not in self._parsers:
            self._parsers[name] = parsers[name](self)
        return self._parsers[name]

    def add_message(self, filename, line, identifier, plural=None,
                    comment=None, context=None):
        identifier = identifier.strip()
        if not identifier:
            return
        self.catalog.add_message(filename, line, identifier, plural=plural,
                                 comment=comment, context=context)
        self.records.append(ExtractionRecord(identifier, filename, line,
                                             plural, comment, context))

    def extract_source(self, filename, src, file_type=None):
        """Extract keys from ``src``; ``file_type`` overrides the extension."""
        if file_type is None:
            file_type = file_type_of(filename)
        if file_type not in parsers:
            self.diagnostics.warn("extract", "unsupported file type",
                                  filename)
            return
        log.debug("extracting %s as %s", filename, file_type)
        extract = getattr(self.parser(file_type), entry_points[file_type])
        extract(filename, src)

    def extract_file(self, path, file_type=None):
        try:
            with open(path, encoding="utf-8") as fp:
                src = fp.read()
        except UnicodeDecodeError as err:
            self.diagnostics.warn("extract", f"cannot decode file: {err}",
                                  str(path))
            return
        self.extract_source(str(path), src, file_type)

    def extract_files(self, files):
        for path in files:
            self.extract_file(path)
        return self.result()

    def result(self):
        return ExtractionResult(self.records, self.catalog, self.diagnostics)


def extract_i18n_items(files, options=None, diagnostics=None):
    """Extract every key referenced from ``files``."""
    return Extractor(options, diagnostics).extract_files(files)
