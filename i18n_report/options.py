import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .errors import ConfigurationError


@dataclass(frozen=True)
class Marker:
    start: str
    end: str
    type: str = "js"


@dataclass(frozen=True)
class Keyword:
    name: str
    position: int = 0


def parse_keyword(keyword):
    """
    Parse a keyword definition of the form ``name[:position]``.

    ``name`` is a dotted callee such as ``$t``, ``this.$t`` or ``app.i18n.t``.
    """
    name, _, position = keyword.partition(":")
    name = name.strip()
    if not name:
        raise ConfigurationError(f"empty keyword in '{keyword}'")
    if not position:
        return Keyword(name)
    if not position.strip().isdigit():
        raise ConfigurationError(
            f"invalid argument position in keyword '{keyword}'")
    return Keyword(name, int(position))


def build_keyword_map(keywords):
    return {k.name: k.position for k in map(parse_keyword, keywords)}


def _compile(patterns):
    return tuple(p if isinstance(p, re.Pattern) else re.compile(p)
                 for p in patterns)


@dataclass
class ExtractorOptions:
    keywords: Tuple[str, ...] = ()
    tag_names: Tuple[str, ...] = ()
    attr_names: Tuple[str, ...] = ()
    value_attr_names: Tuple[str, ...] = ()
    object_attrs: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    filter_names: Tuple[str, ...] = ()
    markers: Tuple[Marker, ...] = ()
    expr_attrs: Tuple[str, ...] = ()

    def __post_init__(self):
        self.keyword_map = build_keyword_map(self.keywords)
        self.value_attr_patterns = _compile(self.value_attr_names)
        self.expr_attr_patterns = _compile(self.expr_attrs)
        self.filter_exprs = tuple(
            re.compile(r"^(.*)\|\s*" + re.escape(name), re.S)
            for name in self.filter_names)

    def keyword_position(self, callee) -> Optional[int]:
        return self.keyword_map.get(callee)

    def is_value_attr(self, attr):
        return any(p.search(attr) for p in self.value_attr_patterns)

    def is_expr_attr(self, attr):
        return any(p.search(attr) for p in self.expr_attr_patterns)


VUE_I18N_KEYWORDS = (
    "$t", "vm.$t", "this.$t", "app.i18n.t",
    "$tc", "vm.$tc", "this.$tc", "app.i18n.tc",
)


def vue_i18n_options(extra_keywords=()):
    """The ruleset for projects using vue-i18n."""
    return ExtractorOptions(
        keywords=VUE_I18N_KEYWORDS + tuple(extra_keywords),
        tag_names=("i18n",),
        object_attrs={"v-t": ("", "path")},
        expr_attrs=(r"^:", r"^v-", r"^@"),
        markers=(Marker("{{", "}}"),),
    )
