import pytest

from i18n_report.errors import EvaluationError
from i18n_report.evaluate import (JAVASCRIPT, VARIABLE_ERROR, evaluate,
                                  js_unescape)
from i18n_report.parsers.script import parse_tree


def js(expression):
    root = parse_tree("javascript", "(" + expression + ")").root_node
    return root.named_children[0].named_children[0]


@pytest.mark.parametrize("expression, expected", [
    ("'hello'", ["hello"]),
    ('"double"', ["double"]),
    (r"'it\'s'", ["it's"]),
    (r"'A\x42'", ["AB"]),
    ("'a' + 'b'", ["ab"]),
    ("(('nested'))", ["nested"]),
    ("ok ? 'yes' : 'no'", ["yes", "no"]),
    ("ok ? 'same' : 'same'", ["same"]),
])
def test_literals(expression, expected):
    assert evaluate(js(expression), JAVASCRIPT) == expected


def test_concatenation_is_left_major_product():
    node = js("(a ? 'x' : 'y') + '.' + (b ? '1' : '2')")
    assert evaluate(node, JAVASCRIPT) == ["x.1", "x.2", "y.1", "y.2"]


@pytest.mark.parametrize("expression, message", [
    ("name", VARIABLE_ERROR),
    ("this.key", VARIABLE_ERROR),
    ("'a.' + key", VARIABLE_ERROR),
    ("`key`", "template strings"),
    ("getKey()", "'call_expression' node"),
    ("'a' - 'b'", "'binary_expression' node"),
    ("42", "'number' node"),
])
def test_non_literals_are_refused(expression, message):
    with pytest.raises(EvaluationError, match=message):
        evaluate(js(expression), JAVASCRIPT)


def test_object_path():
    node = js("{ path: 'a.b', args: { n: 1 } }")
    assert evaluate(node, JAVASCRIPT, "path") == ["a.b"]
    with pytest.raises(EvaluationError, match="no property path other"):
        evaluate(node, JAVASCRIPT, "other")


def test_object_path_with_string_key():
    node = js("{ 'path': ok ? 'a' : 'b' }")
    assert evaluate(node, JAVASCRIPT, "path") == ["a", "b"]


def test_path_on_non_object():
    with pytest.raises(EvaluationError, match="from non-object"):
        evaluate(js("'a.b'"), JAVASCRIPT, "path")


def test_js_unescape():
    assert js_unescape(r"a\nb") == "a\nb"
    assert js_unescape("a\\\nb") == "ab"
    assert js_unescape(r"\u{1F600}") == "\U0001F600"
    assert js_unescape(r"\q") == "q"
