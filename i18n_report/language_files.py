"""
Per-language translation files.

A language file holds one nested mapping of keys to translations, stored as
JSON, YAML or an ES module whose default export is an object literal. Keys
are flattened with a separator ("." by default) to match extracted keys.
"""

import glob
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import orjson
import yaml

from . import MISSING_TRANSLATION_VALUE
from .errors import ConfigurationError, LanguageFileError
from .evaluate import decode_js_string, js_unescape
from .helper import node_line, node_text
from .parsers.script import iter_errors, parse_tree


log = logging.getLogger(__name__)

FORMATS = ("json", "yaml", "yml", "js")


@dataclass(frozen=True)
class LanguageCatalogEntry:
    identifier: str
    value: Any
    language: str
    source_file: str


@dataclass
class LanguageFile:
    language: str
    path: Path
    format: str
    content: Dict[str, Any] = field(default_factory=dict)
    exists: bool = True

    def entries(self, separator="."):
        return [LanguageCatalogEntry(key, value, self.language,
                                     str(self.path))
                for key, value in flatten(self.content, separator).items()]


def format_of(path):
    fmt = Path(path).suffix.lower().lstrip(".")
    return fmt if fmt in FORMATS else None


# nesting

def flatten(content, separator=".", prefix=""):
    """Flatten nested mappings; a ``None`` separator keeps the top level."""
    if separator is None:
        return {str(key): value for key, value in content.items()}
    flat = {}
    for key, value in content.items():
        key = prefix + str(key)
        if isinstance(value, dict) and value:
            flat.update(flatten(value, separator, key + separator))
        else:
            flat[key] = value
    return flat


def set_path(content, key, value, separator="."):
    """
    Set ``key`` in nested ``content``. Returns False when a parent of the
    key already holds a translation.
    """
    parts = key.split(separator) if separator else [key]
    node = content
    for part in parts[:-1]:
        child = node.setdefault(part, {})
        if not isinstance(child, dict):
            return False
        node = child
    if isinstance(node.get(parts[-1]), dict):
        return False
    node[parts[-1]] = value
    return True


def sort_content(content):
    return {key: sort_content(value) if isinstance(value, dict) else value
            for key, value in sorted(content.items(), key=lambda i: str(i[0]))}


# ES modules

def js_static_value(node):
    """Evaluate a JSON-like JavaScript literal."""
    kind = node.type
    if kind == "parenthesized_expression":
        return js_static_value(node.named_children[0])
    if kind == "string":
        return decode_js_string(node)
    if kind == "template_string":
        if any(c.type == "template_substitution" for c in node.children):
            raise ValueError("template string with substitutions")
        return js_unescape(node_text(node)[1:-1])
    if kind == "number":
        text = node_text(node).replace("_", "")
        try:
            return int(text, 0)
        except ValueError:
            return float(text)
    if kind in ("true", "false"):
        return kind == "true"
    if kind in ("null", "undefined"):
        return None
    if kind == "unary_expression":
        operator = node.child_by_field_name("operator")
        value = js_static_value(node.child_by_field_name("argument"))
        if operator is not None and node_text(operator) == "-" \
                and isinstance(value, (int, float)):
            return -value
    if kind == "array":
        return [js_static_value(child) for child in node.named_children
                if child.type != "comment"]
    if kind == "object":
        result = {}
        for child in node.named_children:
            if child.type == "comment":
                continue
            if child.type != "pair":
                raise ValueError(f"unsupported '{child.type}' in object")
            key = child.child_by_field_name("key")
            if key.type == "string":
                name = decode_js_string(key)
            elif key.type in ("property_identifier", "number"):
                name = node_text(key)
            else:
                raise ValueError(f"computed key '{node_text(key)}'")
            result[name] = js_static_value(child.child_by_field_name("value"))
        return result
    raise ValueError(f"cannot evaluate '{kind}' statically "
                     f"(line {node_line(node)})")


def read_js_module(src):
    """The default export (or ``module.exports``) of an ES module."""
    root = parse_tree("javascript", src).root_node
    if root.has_error:
        error = next(iter_errors(root), root)
        raise ValueError(f"syntax error at line {node_line(error)}")
    for statement in root.named_children:
        if statement.type == "export_statement":
            value = statement.child_by_field_name("value")
            if value is not None:
                return js_static_value(value)
        elif statement.type == "expression_statement":
            expression = statement.named_children[0]
            if expression.type != "assignment_expression":
                continue
            left = expression.child_by_field_name("left")
            if node_text(left) == "module.exports":
                return js_static_value(expression.child_by_field_name("right"))
    raise ValueError("no default export")


# reading

def load_content(path, fmt):
    try:
        with open(path, "rb") as fp:
            data = fp.read()
        if fmt == "json":
            content = orjson.loads(data) if data.strip() else None
        elif fmt in ("yaml", "yml"):
            content = yaml.safe_load(data)
        else:
            content = read_js_module(data.decode("utf-8"))
    except (OSError, ValueError, yaml.YAMLError) as err:
        raise LanguageFileError(
            f"Language file {path} is corrupted: {err}") from err
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise LanguageFileError(
            f"Language file {path} is corrupted: top level is not a mapping")
    return content


def read_language_file(path, language=None, fmt=None):
    path = Path(path)
    fmt = fmt or format_of(path)
    if fmt not in FORMATS:
        raise ConfigurationError(f"unsupported language file format '{path}'")
    return LanguageFile(language or path.stem, path, fmt,
                        load_content(path, fmt))


def read_language_files(folder, languages, fmt="json"):
    """Read ``<folder>/<language>.<fmt>`` for every language."""
    folder = Path(folder)
    if not folder.is_dir():
        raise ConfigurationError(
            f"language folder isn't a valid folder ({folder})")
    if fmt not in FORMATS:
        raise ConfigurationError(f"unsupported language format '{fmt}'")

    files = []
    for language in languages:
        path = folder / f"{language}.{fmt}"
        if path.exists():
            files.append(read_language_file(path, language, fmt))
        else:
            log.warning("creating language file for %s (%s)", language, path)
            files.append(LanguageFile(language, path, fmt, exists=False))
    return files


def read_language_glob(pattern):
    """Read every file matching ``pattern``; the file name is the language."""
    paths = sorted(p for p in glob.glob(pattern, recursive=True)
                   if os.path.isfile(p))
    if not paths:
        raise ConfigurationError(
            f"language files glob ({pattern}) has no files")
    files = []
    for path in paths:
        if format_of(path) is None:
            log.warning("skipping %s: unsupported language file", path)
            continue
        files.append(read_language_file(path))
    return files


def parse_language_files(files, separator="."):
    """Map each language to its flattened catalog entries."""
    catalogs: Dict[str, List[LanguageCatalogEntry]] = {}
    for language_file in files:
        catalogs.setdefault(language_file.language, []).extend(
            language_file.entries(separator))
    return catalogs


# writing

def dump_content(content, fmt, sort=False):
    if fmt in ("yaml", "yml"):
        return yaml.safe_dump(content, sort_keys=sort, allow_unicode=True,
                              default_flow_style=False).encode("utf-8")
    data = orjson.dumps(content, option=orjson.OPT_INDENT_2)
    if fmt == "js":
        return b"export default " + data + b"; \n"
    return data + b"\n"


def write_language_file(language_file, sort=False):
    content = language_file.content
    if sort:
        content = sort_content(content)
    language_file.path.parent.mkdir(parents=True, exist_ok=True)
    with open(language_file.path, "wb") as fp:
        fp.write(dump_content(content, language_file.format, sort))
    language_file.exists = True


def write_missing_to_language(files, missing_keys, separator=".",
                              sort=False) -> int:
    """
    Add the placeholder translation for every new missing key to the file
    of its language, and rewrite the changed (or, with ``sort``, all) files.
    Returns the number of keys added.
    """
    added = 0
    for language_file in files:
        changed = False
        for key in missing_keys:
            if key.language != language_file.language or not key.is_new:
                continue
            if set_path(language_file.content, key.identifier,
                        MISSING_TRANSLATION_VALUE, separator):
                changed = True
                added += 1
            else:
                log.warning("cannot add %s to %s: a parent key holds a "
                            "translation", key.identifier, language_file.path)
        if changed or sort:
            log.debug("writing %s", language_file.path)
            write_language_file(language_file, sort)
    return added
