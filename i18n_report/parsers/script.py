import functools

from tree_sitter import Language, Parser

from ..errors import EvaluationError
from ..evaluate import JAVASCRIPT, PHP, TYPESCRIPT, evaluate, unwrap
from ..helper import node_line, node_text, source_line


@functools.lru_cache(maxsize=None)
def get_language(name):
    if name == "javascript":
        import tree_sitter_javascript
        return Language(tree_sitter_javascript.language())
    if name == "typescript":
        import tree_sitter_typescript
        return Language(tree_sitter_typescript.language_typescript())
    if name == "tsx":
        import tree_sitter_typescript
        return Language(tree_sitter_typescript.language_tsx())
    if name == "php":
        import tree_sitter_php
        return Language(tree_sitter_php.language_php())
    raise ValueError(f"no tree-sitter grammar named '{name}'")


def parse_tree(language_name, src):
    parser = Parser(get_language(language_name))
    return parser.parse(src.encode("utf-8"))


def iter_nodes(node):
    """Depth-first, pre-order walk of ``node`` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def iter_errors(node):
    for current in iter_nodes(node):
        if current.type == "ERROR" or current.is_missing:
            yield current


def named_arguments(node):
    if node is None:
        return []
    return [child for child in node.named_children
            if child.type != "comment"]


class ScriptParser:
    """
    Finds translation calls in one script grammar.

    ``extractor`` provides the options, the diagnostics sink and
    ``add_message``; see ``i18n_report.extract.Extractor``.
    """

    language = "javascript"
    grammar = JAVASCRIPT
    call_types = frozenset(("call_expression",))

    def __init__(self, extractor):
        self.extractor = extractor

    @property
    def options(self):
        return self.extractor.options

    @property
    def diagnostics(self):
        return self.extractor.diagnostics

    def parse(self, origin, filename, src, start_line):
        """Parse ``src``, or warn and return None on a syntax error."""
        tree = parse_tree(self.language, src)
        root = tree.root_node
        if root.has_error:
            error = next(iter_errors(root), root)
            line = node_line(error, start_line)
            self.diagnostics.warn(
                origin, "error parsing",
                filename, line, source_line(src, line, start_line))
            return None
        return root

    # call-site matching

    def callee_name(self, node):
        if node is None:
            return None
        if node.type == "identifier":
            return node_text(node)
        if node.type == "this":
            return "this"
        if node.type == "member_expression":
            obj = self.callee_name(node.child_by_field_name("object"))
            prop = node.child_by_field_name("property")
            if obj is None or prop is None:
                return None
            return obj + "." + node_text(prop)
        if node.type == "parenthesized_expression":
            return self.callee_name(unwrap(node, self.grammar))
        return None

    def call_callee(self, node):
        return self.callee_name(node.child_by_field_name("function"))

    def call_arguments(self, node):
        return named_arguments(node.child_by_field_name("arguments"))

    def iter_calls(self, root):
        """Yield ``(call, position)`` for every call to a keyword."""
        for node in iter_nodes(root):
            if node.type not in self.call_types:
                continue
            position = self.options.keyword_position(self.call_callee(node))
            if position is not None:
                yield node, position

    def evaluate_argument(self, call, position):
        arguments = self.call_arguments(call)
        if position >= len(arguments):
            raise EvaluationError(f"no argument at position {position}")
        return evaluate(arguments[position], self.grammar)

    def extract_node(self, origin, filename, root, start_line):
        for call, position in self.iter_calls(root):
            line = node_line(call, start_line)
            try:
                ids = self.evaluate_argument(call, position)
            except EvaluationError as err:
                self.diagnostics.warn(origin, str(err), filename, line,
                                      node_text(call))
                continue
            for msgid in ids:
                self.extractor.add_message(filename, line, msgid)

    def extract_module(self, filename, src, start_line=1):
        origin = f"extract_{self.grammar.name}_module"
        root = self.parse(origin, filename, src, start_line)
        if root is not None:
            self.extract_node(origin, filename, root, start_line)

    # standalone expressions from templates

    def iter_statements(self, root):
        for child in root.named_children:
            if child.type == "expression_statement":
                yield child

    def statement_expression(self, statement):
        inner = named_arguments(statement)
        return inner[0] if inner else None

    def parse_expression(self, origin, filename, src, start_line):
        return self.parse(origin, filename, "(" + src + ")", start_line)

    def extract_expression(self, filename, src, start_line=1):
        """Extract keyword calls found anywhere inside an expression."""
        origin = "extract_expression"
        root = self.parse_expression(origin, filename, src, start_line)
        if root is not None:
            self.extract_node(origin, filename, root, start_line)

    def extract_identifier(self, filename, src, start_line=1):
        """Extract the value of an expression that is itself the key."""
        origin = "extract_identifier"
        root = self.parse_expression(origin, filename, src, start_line)
        if root is None:
            return
        for statement in self.iter_statements(root):
            line = node_line(statement, start_line)
            try:
                ids = evaluate(self.statement_expression(statement),
                               self.grammar)
            except EvaluationError as err:
                self.diagnostics.warn(origin, str(err), filename, line, src)
                continue
            for msgid in ids:
                self.extractor.add_message(filename, line, msgid)

    def extract_object_paths(self, filename, src, paths, start_line=1):
        """
        Extract the key from an expression that is either the key or an
        object holding it in one of ``paths`` ("" means the value itself).
        The first path that evaluates wins.
        """
        origin = "extract_object_paths"
        root = self.parse_expression(origin, filename, src, start_line)
        if root is None:
            return
        for statement in self.iter_statements(root):
            line = node_line(statement, start_line)
            expression = self.statement_expression(statement)
            errors = []
            for path in paths:
                try:
                    ids = evaluate(expression, self.grammar, path)
                except EvaluationError as err:
                    errors.append(err)
                    continue
                for msgid in ids:
                    self.extractor.add_message(filename, line, msgid)
                break
            else:
                for err in errors:
                    self.diagnostics.warn(origin, str(err), filename, line,
                                          src)

    def extract_filter_expression(self, filename, src, start_line=1):
        """Extract keys from Angular style ``'key' | translate`` markers."""
        origin = "extract_filter_expression"
        for filter_expr in self.options.filter_exprs:
            match = filter_expr.match(src)
            if match is None:
                continue
            root = self.parse_expression(origin, filename, match.group(1),
                                         start_line)
            if root is None:
                continue
            for statement in self.iter_statements(root):
                line = node_line(statement, start_line)
                try:
                    ids = evaluate(self.statement_expression(statement),
                                   self.grammar)
                except EvaluationError as err:
                    self.diagnostics.warn(origin, str(err), filename, line,
                                          src.strip())
                    continue
                for msgid in ids:
                    self.extractor.add_message(filename, line, msgid)


class JavaScriptParser(ScriptParser):
    pass


class TypeScriptParser(ScriptParser):
    language = "typescript"
    grammar = TYPESCRIPT


class TsxParser(TypeScriptParser):
    language = "tsx"


class PhpParser(ScriptParser):
    """
    PHP calls: ``__('key')``, ``$this->trans('key')``, ``Lang::get('key')``.
    Object and scope names are joined with dots, so the keywords are written
    ``__``, ``this.trans`` and ``Lang.get``.
    """

    language = "php"
    grammar = PHP
    call_types = frozenset((
        "function_call_expression",
        "member_call_expression",
        "nullsafe_member_call_expression",
        "scoped_call_expression",
    ))

    def callee_name(self, node):
        if node is None:
            return None
        if node.type == "variable_name":
            return node_text(node).lstrip("$")
        if node.type in ("name", "qualified_name", "relative_scope"):
            return node_text(node).lstrip("\\").replace("\\", ".")
        if node.type in ("member_access_expression",
                         "nullsafe_member_access_expression"):
            obj = self.callee_name(node.child_by_field_name("object"))
            name = node.child_by_field_name("name")
            if obj is None or name is None:
                return None
            return obj + "." + node_text(name)
        return None

    def call_callee(self, node):
        if node.type == "function_call_expression":
            return self.callee_name(node.child_by_field_name("function"))
        if node.type == "scoped_call_expression":
            scope = self.callee_name(node.child_by_field_name("scope"))
        else:
            scope = self.callee_name(node.child_by_field_name("object"))
        name = node.child_by_field_name("name")
        if scope is None or name is None:
            return None
        return scope + "." + node_text(name)

    def call_arguments(self, node):
        arguments = []
        for argument in named_arguments(node.child_by_field_name("arguments")):
            if argument.type == "argument":
                inner = named_arguments(argument)
                argument = inner[-1] if inner else None
            arguments.append(argument)
        return arguments
