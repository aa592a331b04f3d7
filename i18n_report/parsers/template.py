import re
from dataclasses import dataclass
from html.parser import HTMLParser
from typing import List, Optional, Tuple

from ..helper import find_non_space, get_line_to, line_offsets


VOID_ELEMENTS = frozenset((
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
))

JS_SCRIPT_TYPES = (None, "", "text/javascript")

# `item in items`, `(item, index) of items`
V_FOR_ALIAS = re.compile(r"^\s*(?:\([^)]*\)|[^\s()]+)\s+(?:in|of)\s+", re.S)


@dataclass
class Element:
    name: str
    attrs: List[Tuple[str, Optional[str]]]
    start: int
    start_tag: str
    content_start: int
    depth: int
    content_end: Optional[int] = None

    @property
    def attribs(self):
        return dict(self.attrs)

    def inner(self, src):
        if self.content_end is None:
            return ""
        return src[self.content_start:self.content_end]

    def attr_value_offset(self, attr):
        """Offset of the first character of the value of ``attr``."""
        match = re.search(r"[\s\"'/]" + re.escape(attr) + r"\s*=\s*[\"']?",
                          self.start_tag, re.I)
        if match is None:
            return self.start
        return self.start + match.end()


class ElementScanner(HTMLParser):
    """
    Records every element of a markup document with the offsets of its
    start tag and of its raw content. Text is never decoded, so the content
    can be sliced from the source text.
    """

    def __init__(self, src):
        super().__init__(convert_charrefs=False)
        self.src = src
        self.offsets = line_offsets(src)
        self.elements: List[Element] = []
        self.stack: List[Element] = []

    def _offset(self):
        line, column = self.getpos()
        return self.offsets[line - 1] + column

    def _element(self, tag, attrs):
        start = self._offset()
        start_tag = self.get_starttag_text() or ""
        element = Element(tag, attrs, start, start_tag,
                          start + len(start_tag), len(self.stack))
        self.elements.append(element)
        return element

    def handle_starttag(self, tag, attrs):
        element = self._element(tag, attrs)
        if tag in VOID_ELEMENTS:
            element.content_end = element.content_start
        else:
            self.stack.append(element)

    def handle_startendtag(self, tag, attrs):
        element = self._element(tag, attrs)
        element.content_end = element.content_start

    def handle_endtag(self, tag):
        end = self._offset()
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].name == tag:
                for element in self.stack[index:]:
                    element.content_end = end
                del self.stack[index:]
                return

    def close(self):
        super().close()
        for element in self.stack:
            element.content_end = len(self.src)
        self.stack = []


def scan_elements(src):
    scanner = ElementScanner(src)
    scanner.feed(src)
    scanner.close()
    return scanner.elements


class TemplateParser:
    """
    Extracts keys from HTML templates: translation tags and attributes,
    bound attributes, nested scripts and interpolation markers.
    """

    def __init__(self, extractor):
        self.extractor = extractor

    @property
    def options(self):
        return self.extractor.options

    @property
    def diagnostics(self):
        return self.extractor.diagnostics

    @property
    def script(self):
        return self.extractor.parser("javascript")

    def add_content_message(self, filename, src, element, start_line):
        msgid = element.inner(src).strip()
        if not msgid:
            return
        attribs = element.attribs
        first = find_non_space(src, element.content_start)
        self.extractor.add_message(
            filename, get_line_to(src, first, start_line), msgid,
            plural=attribs.get("translate-plural") or None,
            comment=attribs.get("translate-comment") or None,
            context=attribs.get("translate-context") or None)

    def extract_script_element(self, filename, src, element, start_line):
        content = element.inner(src)
        if not content:
            return
        line = get_line_to(src, element.content_start, start_line)
        script_type = element.attribs.get("type")
        if script_type in JS_SCRIPT_TYPES:
            self.script.extract_module(filename, content, line)
        elif script_type == "text/ng-template":
            self.extract(filename, content, line)

    def extract_tag(self, filename, src, element, start_line):
        attribs = element.attribs
        if element.name == "translate":
            self.add_content_message(filename, src, element, start_line)
        elif element.name == "i18n":
            line = get_line_to(src, element.start, start_line)
            if "path" in attribs:
                if attribs["path"]:
                    self.extractor.add_message(filename, line,
                                               attribs["path"])
            elif attribs.get(":path"):
                self.script.extract_identifier(filename, attribs[":path"],
                                               line)

    def extract_attribute(self, filename, src, element, attr, value,
                          start_line):
        line = get_line_to(src, element.attr_value_offset(attr), start_line)
        if attr in self.options.object_attrs:
            self.script.extract_object_paths(
                filename, value, self.options.object_attrs[attr], line)
        elif self.options.is_value_attr(attr):
            self.script.extract_identifier(filename, value, line)
        elif self.options.is_expr_attr(attr):
            if attr == "v-for":
                alias = V_FOR_ALIAS.match(value)
                if alias:
                    line += alias.group(0).count("\n")
                    value = value[alias.end():]
            self.script.extract_expression(filename, value, line)

    def extract_markers(self, filename, src, skipped, start_line):
        for marker in self.options.markers:
            index = 0
            while True:
                start_offset = src.find(marker.start, index)
                if start_offset == -1:
                    break
                start_offset += len(marker.start)
                end_offset = src.find(marker.end, start_offset)
                if end_offset == -1:
                    index = start_offset
                    continue
                index = end_offset + len(marker.end)
                if any(begin <= start_offset < end for begin, end in skipped):
                    continue
                content = src[start_offset:end_offset]
                line = get_line_to(src, start_offset, start_line)
                if marker.type == "angular":
                    self.script.extract_filter_expression(filename, content,
                                                          line)
                else:
                    self.script.extract_expression(filename, content, line)

    def extract(self, filename, src, start_line=1):
        try:
            elements = scan_elements(src)
        except (AssertionError, ValueError) as err:
            self.diagnostics.warn("extract_template",
                                  f"error parsing template: {err}",
                                  filename, start_line)
            return

        scripts = []
        for element in elements:
            attribs = element.attribs
            if element.name == "script":
                scripts.append((element.content_start,
                                element.content_end or element.content_start))
                self.extract_script_element(filename, src, element,
                                            start_line)

            if element.name in self.options.tag_names:
                self.extract_tag(filename, src, element, start_line)

            if any(attr in attribs for attr in self.options.attr_names):
                self.add_content_message(filename, src, element, start_line)

            for attr, value in element.attrs:
                if value:
                    self.extract_attribute(filename, src, element, attr,
                                           value, start_line)

        self.extract_markers(filename, src, scripts, start_line)
