import logging
import sys
from logging.config import dictConfig
from pathlib import Path

import click

from .errors import I18nReportError
from .extract import extract_i18n_items
from .language_files import (FORMATS, parse_language_files,
                             read_language_files, read_language_glob,
                             write_missing_to_language)
from .options import vue_i18n_options
from .report import reconcile, write_report_to_file
from .source_files import DEFAULT_IGNORE, find_source_files


log = logging.getLogger(__name__)


class LevelTrackingFilter(logging.Filter):
    """
    Logging filter that will remember the highest level that was emitted
    """
    def __init__(self):
        super().__init__()
        self.level = logging.NOTSET

    def filter(self, record):
        self.level = max(self.level, record.levelno)
        return True


LOGGING_CONFIG = {
    'formatters': {
        'standard': {'format': '%(levelname)s %(name)s: %(message)s'},
    },
    'handlers': {
        'default': {
            'level': 'NOTSET',
            'formatter': 'standard',
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        'i18n_report': {
            'handlers': ['default'],
            'level': 'INFO',
        },
    },
    'disable_existing_loggers': False,
    'version': 1,
}


def setup_logging(verbose=False):
    """Configure the package logger and return the level tracker."""
    dictConfig(LOGGING_CONFIG)
    package_log = logging.getLogger('i18n_report')
    if verbose:
        package_log.setLevel(logging.DEBUG)
    tracker = LevelTrackingFilter()
    for handler in package_log.handlers:
        handler.addFilter(tracker)
    return tracker


def print_table(title, columns, rows, color):
    if not rows:
        click.secho(f"No {title.lower()}!", fg="green")
        return
    rows = [[("" if cell is None else str(cell)) for cell in row]
            for row in rows]
    widths = [max([len(column)] + [len(row[i]) for row in rows])
              for i, column in enumerate(columns)]
    click.secho(f"{title}:", fg="magenta")
    click.echo("  ".join(c.ljust(w) for c, w in zip(columns, widths)))
    click.echo("  ".join("-" * w for w in widths))
    for row in rows:
        click.secho("  ".join(c.ljust(w) for c, w in zip(row, widths)),
                    fg=color)


def output_to_screen(report):
    print_table(
        "Missing keys",
        ("language", "key", "file", "line", "new"),
        [(k.language, k.identifier, k.source_file, k.source_line,
          "yes" if k.is_new else "no") for k in report.missing],
        "yellow")
    click.echo()
    print_table(
        "Unused keys",
        ("language", "key", "value", "file"),
        [(k.language, k.identifier, k.value, k.source_file)
         for k in report.unused],
        "cyan")


def split_languages(languages):
    return [language.strip() for language in languages.split(",")
            if language.strip()]


@click.command()
@click.option(
    "-s",
    "--src",
    "sources",
    multiple=True,
    required=True,
    help="""Source file, folder or glob pattern to extract keys from.
    Can be given several times.""",
)
@click.option(
    "-d",
    "--languages-dir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Folder holding one <language>.<format> file per language.",
)
@click.option(
    "-l",
    "--languages",
    default="",
    help="Comma separated list of languages, e.g. en,fr.",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="json",
    help="Format of the files in --languages-dir.",
    show_default=True,
)
@click.option(
    "--language-files",
    help="""Glob pattern of the language files, used instead of
    --languages-dir. The file name is the language.""",
)
@click.option(
    "--separator",
    default=".",
    help="Separator joining the keys of nested language files.",
    show_default=True,
)
@click.option(
    "--flat",
    is_flag=True,
    help="Language files use flat keys; do not split them on the separator.",
)
@click.option(
    "-k",
    "--keyword",
    "keywords",
    multiple=True,
    help="Extra translation function, as name[:argument position].",
)
@click.option(
    "--ignore",
    multiple=True,
    help="Glob pattern of source paths to skip (node_modules always is).",
)
@click.option(
    "--add-missing / --no-add-missing",
    default=True,
    help="Write new missing keys into the language files.",
    show_default=True,
)
@click.option(
    "--sort / --no-sort",
    default=True,
    help="Sort the keys of the language files when writing them.",
    show_default=True,
)
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Write the report as JSON to this file.",
)
@click.option(
    "--pot",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Write the extracted messages as a PO template to this file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
@click.option(
    "--fail-on-warnings",
    is_flag=True,
    help="Exit with status 1 when any warning was logged.",
)
def cli(sources, languages_dir, languages, fmt, language_files, separator,
        flat, keywords, ignore, add_missing, sort, output, pot, verbose,
        fail_on_warnings) -> None:
    """Report i18n keys missing from or unused in the language files."""
    tracker = setup_logging(verbose)

    if not language_files and not (languages_dir and languages):
        raise click.UsageError(
            "give either --language-files or both --languages-dir "
            "and --languages")
    if flat:
        separator = None

    try:
        # Language files are checked before the sources are parsed.
        if language_files:
            files = read_language_glob(language_files)
        else:
            files = read_language_files(languages_dir,
                                        split_languages(languages), fmt)

        paths = find_source_files(sources, ignore=DEFAULT_IGNORE + ignore)
        log.debug("extracting from %d files", len(paths))
        result = extract_i18n_items(paths, vue_i18n_options(keywords))

        report = reconcile(result.records,
                           parse_language_files(files, separator))
        output_to_screen(report)

        if output:
            write_report_to_file(report, output)
            click.echo(f"Report written to '{output}'")
        if pot:
            pot.write_text(result.catalog.serialize(), encoding="utf-8")
            click.echo(f"Messages written to '{pot}'")

        missing_to_add = report.new_missing() if add_missing else []
        if sort or missing_to_add:
            added = write_missing_to_language(files, missing_to_add,
                                              separator, sort)
            if added:
                click.secho(f"{added} missing keys have been added to your "
                            "language files", fg="magenta")
    except I18nReportError as err:
        raise click.ClickException(str(err)) from err

    if fail_on_warnings and tracker.level >= logging.WARNING:
        sys.exit(1)


if __name__ == "__main__":
    cli()
