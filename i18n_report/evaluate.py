"""
Static evaluation of translation key arguments.

Only expressions built from string literals, concatenation and the
conditional operator are accepted. Everything else (variables, member
access, template strings, calls...) is refused instead of guessed, so an
extracted key always exists verbatim in the source.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Optional

from .errors import EvaluationError
from .helper import node_text


VARIABLE_ERROR = ("cannot extract translations from variable, "
                  "use string literal directly")


def _named(node):
    return [child for child in node.named_children if child.type != "comment"]


# JavaScript / TypeScript string literals

JS_ESCAPE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}"
    r"|\r\n|[\s\S])")

JS_SIMPLE_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v",
}

LINE_CONTINUATIONS = ("\n", "\r\n", "\r", "\u2028", "\u2029")


def _fix_surrogates(text):
    return text.encode("utf-16", "surrogatepass").decode("utf-16")


def js_unescape(text):
    def replace(match):
        seq = match.group(1)
        if seq in LINE_CONTINUATIONS:
            return ""
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] == "u" and len(seq) == 5:
            return chr(int(seq[1:], 16))
        if seq[0] == "x" and len(seq) == 3:
            return chr(int(seq[1:], 16))
        if seq[0] in "01234567":
            return chr(int(seq, 8))
        return JS_SIMPLE_ESCAPES.get(seq, seq)

    return _fix_surrogates(JS_ESCAPE.sub(replace, text))


def decode_js_string(node):
    return js_unescape(node_text(node)[1:-1])


# PHP string literals

PHP_SINGLE_ESCAPE = re.compile(r"\\([\\'])")

PHP_DOUBLE_ESCAPE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|x[0-9a-fA-F]{1,2}|[0-7]{1,3}|[nrtvef\\$\"])")

PHP_SIMPLE_ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t", "v": "\v", "e": "\x1b", "f": "\f",
    "\\": "\\", "$": "$", "\"": "\"",
}

PHP_STRING_PARTS = frozenset(
    ("string_content", "string_value", "escape_sequence", "string", "text"))


def _strip_php_quotes(text):
    if text[:1] in "bB" and text[1:2] in ("'", "\""):
        text = text[1:]
    return text[1:-1]


def decode_php_single_quoted(node):
    text = _strip_php_quotes(node_text(node))
    return PHP_SINGLE_ESCAPE.sub(lambda m: m.group(1), text)


def decode_php_double_quoted(node):
    for child in node.named_children:
        if child.type not in PHP_STRING_PARTS:
            raise EvaluationError(
                "cannot extract translations from interpolated string, "
                "use sprintf for formatting")

    def replace(match):
        seq = match.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] == "x":
            return chr(int(seq[1:], 16))
        if seq[0] in "01234567":
            return chr(int(seq, 8) & 0xFF)
        return PHP_SIMPLE_ESCAPES[seq]

    text = _strip_php_quotes(node_text(node))
    return _fix_surrogates(PHP_DOUBLE_ESCAPE.sub(replace, text))


# Grammar descriptions

@dataclass(frozen=True)
class Grammar:
    """
    The node kinds of one tree-sitter grammar that the evaluator consumes.
    Any kind not listed here is rejected.
    """
    name: str
    strings: Dict[str, Callable] = field(default_factory=dict)
    variables: FrozenSet[str] = frozenset()
    templates: Dict[str, str] = field(default_factory=dict)
    parenthesized: FrozenSet[str] = frozenset()
    binary: str = "binary_expression"
    concat_operator: str = "+"
    conditional: str = "ternary_expression"
    consequence: str = "consequence"
    alternative: str = "alternative"
    object: Optional[str] = None
    pair: Optional[str] = None
    property_keys: FrozenSet[str] = frozenset()


JAVASCRIPT = Grammar(
    name="javascript",
    strings={"string": decode_js_string},
    variables=frozenset(("identifier", "member_expression",
                         "subscript_expression", "this")),
    templates={"template_string": "cannot extract translations from "
               "template strings (`Example`), use string literal directly"},
    parenthesized=frozenset(("parenthesized_expression",)),
    object="object",
    pair="pair",
    property_keys=frozenset(("property_identifier", "identifier", "number")),
)

TYPESCRIPT = Grammar(
    name="typescript",
    strings=JAVASCRIPT.strings,
    variables=JAVASCRIPT.variables,
    templates=JAVASCRIPT.templates,
    parenthesized=JAVASCRIPT.parenthesized,
    object=JAVASCRIPT.object,
    pair=JAVASCRIPT.pair,
    property_keys=JAVASCRIPT.property_keys,
)

PHP = Grammar(
    name="php",
    strings={
        "string": decode_php_single_quoted,
        "encapsed_string": decode_php_double_quoted,
    },
    variables=frozenset(("variable_name", "member_access_expression",
                         "nullsafe_member_access_expression",
                         "subscript_expression", "name")),
    templates={
        "heredoc": "cannot extract translations from heredoc, "
                   "use string literal directly",
        "nowdoc": "cannot extract translations from nowdoc, "
                  "use string literal directly",
    },
    parenthesized=frozenset(("parenthesized_expression",)),
    concat_operator=".",
    conditional="conditional_expression",
    consequence="body",
    alternative="alternative",
)


def _unique(values):
    return list(dict.fromkeys(values))


def unwrap(node, grammar):
    while node is not None and node.type in grammar.parenthesized:
        inner = _named(node)
        node = inner[0] if inner else None
    return node


def _property_key(key, grammar):
    if key.type in grammar.strings:
        return grammar.strings[key.type](key)
    if key.type in grammar.property_keys:
        return node_text(key)
    return None


def _evaluate_path(node, grammar, path):
    node = unwrap(node, grammar)
    if node is None or grammar.object is None or node.type != grammar.object:
        raise EvaluationError(
            f"cannot extract translations with path {path} from non-object")
    for prop in _named(node):
        if prop.type != grammar.pair:
            continue
        key = prop.child_by_field_name("key")
        if key is not None and _property_key(key, grammar) == path:
            return evaluate(prop.child_by_field_name("value"), grammar)
    raise EvaluationError(f"no property path {path} in object")


def evaluate(node, grammar, path=""):
    """
    Return every string ``node`` can statically evaluate to.

    With ``path``, ``node`` must be an object literal and the value of its
    ``path`` property is evaluated instead.
    Raises EvaluationError when the value is not a static literal.
    """
    if path:
        return _evaluate_path(node, grammar, path)
    if node is None:
        raise EvaluationError("no argument to extract translations from")

    kind = node.type
    if kind in grammar.parenthesized:
        return evaluate(unwrap(node, grammar), grammar)
    if kind in grammar.strings:
        return [grammar.strings[kind](node)]
    if kind in grammar.variables:
        raise EvaluationError(VARIABLE_ERROR)
    if kind in grammar.templates:
        raise EvaluationError(grammar.templates[kind])
    if kind == grammar.binary:
        operator = node.child_by_field_name("operator")
        if operator is not None and operator.type == grammar.concat_operator:
            lefts = evaluate(node.child_by_field_name("left"), grammar)
            rights = evaluate(node.child_by_field_name("right"), grammar)
            return _unique(left + right for left in lefts for right in rights)
    if kind == grammar.conditional:
        consequence = node.child_by_field_name(grammar.consequence)
        if consequence is None:
            raise EvaluationError(
                "cannot extract translations from a short ternary")
        values = evaluate(consequence, grammar)
        alternative = node.child_by_field_name(grammar.alternative)
        return _unique(values + evaluate(alternative, grammar))
    raise EvaluationError(f"cannot extract translations from '{kind}' node, "
                          "use string literal directly")
