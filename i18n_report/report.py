import enum
import logging
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import orjson

from . import MISSING_TRANSLATION_VALUE


log = logging.getLogger(__name__)


class ReportType(enum.Flag):
    NONE = 0
    MISSING = enum.auto()
    UNUSED = enum.auto()
    ALL = MISSING | UNUSED


@dataclass(frozen=True)
class MissingKey:
    identifier: str
    source_file: str
    source_line: int
    language: str
    is_new: bool = True


@dataclass(frozen=True)
class UnusedKey:
    identifier: str
    value: Optional[object]
    language: str
    source_file: Optional[str] = None


@dataclass
class Report:
    missing: List[MissingKey] = field(default_factory=list)
    unused: List[UnusedKey] = field(default_factory=list)
    report_type: ReportType = ReportType.ALL

    def new_missing(self):
        return [key for key in self.missing if key.is_new]

    def to_dict(self):
        result = {}
        if self.report_type & ReportType.MISSING:
            result["missing_keys"] = [asdict(key) for key in self.missing]
        if self.report_type & ReportType.UNUSED:
            result["unused_keys"] = [asdict(key) for key in self.unused]
        return result


def first_records(records):
    """The first record of every distinct identifier, in order."""
    seen = {}
    for record in records:
        seen.setdefault(record.identifier, record)
    return list(seen.values())


def reconcile(records, language_catalogs, report_type=ReportType.ALL):
    """
    Compare the extracted ``records`` with ``language_catalogs``, a mapping
    of language to its list of LanguageCatalogEntry.

    A key is missing from a language when it has no entry there, or when
    the entry has no value or still holds the placeholder. Only keys that
    are absent altogether are new. Entries no record references are unused.
    """
    report = Report(report_type=report_type)
    used = first_records(records)
    identifiers = {record.identifier for record in used}

    for language, entries in language_catalogs.items():
        values = {entry.identifier: entry.value for entry in entries}
        if report_type & ReportType.MISSING:
            for record in used:
                value = values.get(record.identifier)
                if value is not None and value != MISSING_TRANSLATION_VALUE:
                    continue
                report.missing.append(MissingKey(
                    record.identifier, record.source_file,
                    record.source_line, language,
                    is_new=value != MISSING_TRANSLATION_VALUE))
        if report_type & ReportType.UNUSED:
            report.unused.extend(
                UnusedKey(entry.identifier, entry.value, language,
                          entry.source_file)
                for entry in entries if entry.identifier not in identifiers)

    log.debug("%d missing and %d unused keys over %d languages",
              len(report.missing), len(report.unused),
              len(language_catalogs))
    return report


def write_report_to_file(report, path):
    with open(path, "wb") as fp:
        fp.write(orjson.dumps(report.to_dict(), option=orjson.OPT_INDENT_2))
