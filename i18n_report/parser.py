from .parsers import (JavaScriptParser, PhpParser, TemplateParser,
                      TsxParser, TypeScriptParser, VueParser)


parsers = {
    "vue": VueParser,
    "template": TemplateParser,
    "javascript": JavaScriptParser,
    "typescript": TypeScriptParser,
    "tsx": TsxParser,
    "php": PhpParser,
}

file_types = {
    ".vue": "vue",
    ".html": "template",
    ".htm": "template",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".php": "php",
}

# The method each file type is extracted with.
entry_points = {
    "vue": "extract",
    "template": "extract",
    "javascript": "extract_module",
    "typescript": "extract_module",
    "tsx": "extract_module",
    "php": "extract_module",
}
