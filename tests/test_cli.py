import orjson
import pytest
from click.testing import CliRunner

from i18n_report import MISSING_TRANSLATION_VALUE
from i18n_report.cli import cli


PAGE = """<template>
  <p>{{ $t('greeting.hello') }}</p>
</template>
<script>
export default {
  computed: {
    title() { return this.$t('page.title') },
  },
}
</script>
"""


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "Page.vue").write_text(PAGE, encoding="utf-8")
    lang = tmp_path / "lang"
    lang.mkdir()
    (lang / "en.json").write_text(
        '{"greeting": {"hello": "Hello"}, "orphan": "Orphan"}',
        encoding="utf-8")
    return tmp_path


def run(*args):
    return CliRunner().invoke(cli, [str(a) for a in args])


def test_report_and_add_missing(project):
    lang = project / "lang"
    report_path = project / "report.json"

    result = run("--src", project / "src", "--languages-dir", lang,
                 "--languages", "en, fr", "--output", report_path)

    assert result.exit_code == 0, result.output
    assert "Missing keys:" in result.output
    assert "Unused keys:" in result.output
    assert "3 missing keys have been added" in result.output

    report = orjson.loads(report_path.read_bytes())
    assert [(k["language"], k["identifier"], k["source_line"])
            for k in report["missing_keys"]] == [
        ("en", "page.title", 7),
        ("fr", "greeting.hello", 2), ("fr", "page.title", 7)]
    assert [k["identifier"] for k in report["unused_keys"]] == ["orphan"]

    en = orjson.loads((lang / "en.json").read_bytes())
    assert en == {"greeting": {"hello": "Hello"}, "orphan": "Orphan",
                  "page": {"title": MISSING_TRANSLATION_VALUE}}
    fr = orjson.loads((lang / "fr.json").read_bytes())
    assert fr == {"greeting": {"hello": MISSING_TRANSLATION_VALUE},
                  "page": {"title": MISSING_TRANSLATION_VALUE}}


def test_no_add_missing_leaves_files_alone(project):
    lang = project / "lang"
    before = (lang / "en.json").read_bytes()

    result = run("--src", project / "src", "--languages-dir", lang,
                 "--languages", "en", "--no-add-missing", "--no-sort")

    assert result.exit_code == 0, result.output
    assert (lang / "en.json").read_bytes() == before


def test_language_files_glob_and_pot(project):
    pot = project / "messages.pot"
    result = run("--src", project / "src",
                 "--language-files", project / "lang" / "*.json",
                 "--pot", pot, "--no-add-missing", "--no-sort")

    assert result.exit_code == 0, result.output
    text = pot.read_text(encoding="utf-8")
    assert 'msgid "page.title"' in text
    assert f"#: {project / 'src' / 'Page.vue'}:7" in text


def test_custom_keyword(project):
    (project / "src" / "util.js").write_text("translate('custom.key')\n",
                                             encoding="utf-8")
    report_path = project / "report.json"
    result = run("--src", project / "src", "--languages-dir",
                 project / "lang", "--languages", "en", "--keyword",
                 "translate", "--ignore", "*.vue", "--output", report_path,
                 "--no-add-missing", "--no-sort")

    assert result.exit_code == 0, result.output
    report = orjson.loads(report_path.read_bytes())
    assert [k["identifier"] for k in report["missing_keys"]] == ["custom.key"]


def test_language_options_are_required(project):
    result = run("--src", project / "src")
    assert result.exit_code == 2
    assert "--language-files" in result.output


def test_configuration_errors_are_reported(project):
    result = run("--src", project / "src", "--languages-dir",
                 project / "missing", "--languages", "en")
    assert result.exit_code == 1
    assert "isn't a valid folder" in result.output


def test_fail_on_warnings(project):
    (project / "src" / "dynamic.js").write_text("$t(key)\n",
                                                encoding="utf-8")
    args = ["--src", project / "src", "--languages-dir", project / "lang",
            "--languages", "en", "--no-add-missing", "--no-sort"]

    assert run(*args).exit_code == 0
    result = run(*args, "--fail-on-warnings")
    assert result.exit_code == 1
