import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    origin: str
    message: str
    filename: Optional[str] = None
    line: Optional[int] = None
    fragment: Optional[str] = None

    def location(self) -> str:
        if self.filename is None:
            return ""
        if self.line is None:
            return self.filename
        return f"{self.filename}:{self.line}"

    def __str__(self):
        text = f"{self.origin}: {self.message}"
        if self.fragment:
            text += f" '{self.fragment}'"
        location = self.location()
        if location:
            text += f" ({location})"
        return text


class Diagnostics:
    """
    Collects the recoverable problems of one extraction pass.

    Every warning is kept for the final report and also logged, so callers
    that only look at the log still see it.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.items: List[Diagnostic] = []
        self.log = logger or log

    def warn(self, origin, message, filename=None, line=None,
             fragment=None) -> Diagnostic:
        diagnostic = Diagnostic(origin, message, filename, line, fragment)
        self.items.append(diagnostic)
        self.log.warning("%s", diagnostic)
        return diagnostic

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self):
        return len(self.items)
