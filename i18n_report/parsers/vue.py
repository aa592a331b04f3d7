from ..helper import get_line_to
from .template import JS_SCRIPT_TYPES, scan_elements


SCRIPT_LANGUAGES = {
    None: "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "tsx",
}

TEMPLATE_LANGUAGES = (None, "html")


class VueParser:
    """Single-file components: the top-level <template> and <script> blocks."""

    def __init__(self, extractor):
        self.extractor = extractor

    @property
    def diagnostics(self):
        return self.extractor.diagnostics

    def extract(self, filename, src, start_line=1):
        try:
            elements = scan_elements(src)
        except (AssertionError, ValueError) as err:
            self.diagnostics.warn("extract_vue",
                                  f"error parsing component: {err}",
                                  filename, start_line)
            return

        for element in elements:
            if element.depth != 0:
                continue
            content = element.inner(src)
            if not content:
                continue
            line = get_line_to(src, element.content_start, start_line)
            attribs = element.attribs

            if element.name == "template":
                if attribs.get("lang") not in TEMPLATE_LANGUAGES:
                    self.diagnostics.warn(
                        "extract_vue",
                        f"unsupported template lang '{attribs['lang']}'",
                        filename, line)
                    continue
                self.extractor.parser("template").extract(filename, content,
                                                          line)
            elif element.name == "script":
                if attribs.get("type") not in JS_SCRIPT_TYPES:
                    continue
                language = SCRIPT_LANGUAGES.get(attribs.get("lang"))
                if language is None:
                    self.diagnostics.warn(
                        "extract_vue",
                        f"unsupported script lang '{attribs['lang']}'",
                        filename, line)
                    continue
                self.extractor.parser(language).extract_module(
                    filename, content, line)
