import pytest
from conftest import extract, found

from i18n_report.errors import PluralConflictError
from i18n_report.extract import Extractor, extract_i18n_items, file_type_of
from i18n_report.options import vue_i18n_options


def test_file_type_of():
    assert file_type_of("a/B.VUE") == "vue"
    assert file_type_of("x.mjs") == "javascript"
    assert file_type_of("x.tsx") == "tsx"
    assert file_type_of("README") is None


def test_unsupported_extension_is_skipped_with_a_warning():
    extractor = extract("notes.txt", "$t('a')")
    assert extractor.records == []
    diagnostic, = extractor.diagnostics
    assert diagnostic.message == "unsupported file type"
    assert diagnostic.filename == "notes.txt"


def test_declared_type_overrides_extension():
    extractor = extract("snippet.txt", "$t('a')", file_type="javascript")
    assert found(extractor) == [("a", 1)]


def test_parsers_are_shared_within_a_pass(extractor):
    assert extractor.parser("javascript") is extractor.parser("javascript")
    assert extractor.parser("template").script is \
        extractor.parser("javascript")


def test_empty_identifiers_are_dropped(extractor):
    extractor.add_message("a.js", 1, "   ")
    extractor.add_message("a.js", 2, " padded ")
    assert found(extractor) == [("padded", 2)]
    assert len(extractor.catalog) == 1


def test_rejected_message_leaves_no_record(extractor):
    extractor.add_message("a.js", 1, "File", plural="Files")
    with pytest.raises(PluralConflictError):
        extractor.add_message("a.js", 2, "File", plural="Filez")
    assert found(extractor) == [("File", 1)]


def test_extract_files_keeps_traversal_order(tmp_path):
    first = tmp_path / "First.vue"
    first.write_text("<template>\n  <p>{{ $t('shared') }}</p>\n</template>\n",
                     encoding="utf-8")
    second = tmp_path / "second.js"
    second.write_text("$t('only.js')\n$t('shared')\n", encoding="utf-8")

    result = extract_i18n_items([first, second])

    assert [(r.identifier, r.source_file, r.source_line)
            for r in result.records] == [
        ("shared", str(first), 2),
        ("only.js", str(second), 1),
        ("shared", str(second), 2),
    ]
    entry = result.catalog.find(None, "shared")
    assert entry.references == tuple(sorted(
        (f"{first}:2", f"{second}:2")))
    assert len(result.diagnostics) == 0


def test_undecodable_file_is_reported(tmp_path):
    path = tmp_path / "latin1.js"
    path.write_bytes(b"$t('caf\xe9')")
    extractor = Extractor(vue_i18n_options())
    result = extractor.extract_files([path])
    assert result.records == []
    assert "cannot decode file" in result.diagnostics.items[0].message
