import logging

from i18n_report.diagnostics import Diagnostic, Diagnostics


def test_diagnostic_str_names_location_and_fragment():
    diagnostic = Diagnostic("extract_expression", "bad", "a.vue", 3, "t(x)")
    assert diagnostic.location() == "a.vue:3"
    assert str(diagnostic) == "extract_expression: bad 't(x)' (a.vue:3)"
    assert Diagnostic("extract", "oops").location() == ""


def test_warnings_are_kept_and_logged(caplog):
    diagnostics = Diagnostics()
    with caplog.at_level(logging.WARNING, logger="i18n_report"):
        diagnostics.warn("extract", "first", "a.js", 1)
        diagnostics.warn("extract", "second", "b.js", 2)

    assert len(diagnostics) == 2
    assert [d.filename for d in diagnostics] == ["a.js", "b.js"]
    assert "first" in caplog.text
