from .script import JavaScriptParser, PhpParser, TsxParser, TypeScriptParser
from .template import TemplateParser
from .vue import VueParser


__all__ = [
    "JavaScriptParser",
    "PhpParser",
    "TemplateParser",
    "TsxParser",
    "TypeScriptParser",
    "VueParser",
]
