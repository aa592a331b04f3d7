from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import MalformedReferenceError, PluralConflictError


@dataclass(frozen=True)
class ExtractionRecord:
    identifier: str
    source_file: str
    source_line: int
    plural: Optional[str] = None
    comment: Optional[str] = None
    context: Optional[str] = None


@dataclass(frozen=True)
class MessageEntry:
    context: Optional[str]
    identifier: str
    plural: Optional[str] = None
    references: Tuple[str, ...] = ()
    comments: Tuple[str, ...] = ()
    flags: Tuple[str, ...] = ()

    @property
    def key(self):
        return (self.context or "", self.identifier)


def format_reference(filename, line):
    return f"{filename}:{line}"


def parse_reference(reference):
    """Split a ``file:line`` reference, raising on anything else."""
    filename, sep, line = reference.rpartition(":")
    if not sep or not filename or not line.isdigit():
        raise MalformedReferenceError(f"Invalid PO reference '{reference}'")
    return filename, int(line)


ISOLATE_START = "\u2068"
ISOLATE_END = "\u2069"


def isolate_filename(filename):
    """Wrap a file name holding whitespace in Unicode isolates."""
    if any(char.isspace() for char in filename):
        return f"{ISOLATE_START}{filename}{ISOLATE_END}"
    return filename


def iter_references(occurrences):
    """
    Yield ``file:line`` references from polib occurrences.

    polib splits the occurrence lines on whitespace, so the pieces of an
    isolated file name are joined back with a single space.
    """
    pending = None
    for filename, line in occurrences:
        token = f"{filename}:{line}" if line else filename
        if pending is not None:
            pending += " " + token
        elif token.startswith(ISOLATE_START):
            pending = token
        else:
            yield token
            continue
        if ISOLATE_END in pending:
            name, _, rest = pending[1:].partition(ISOLATE_END)
            pending = None
            yield name + rest
    if pending is not None:
        yield pending


def split_comment(comment):
    return [line for line in comment.splitlines() if line]


class MessageEntryBuilder:
    """
    Accumulates the references, comments and flags of one message.
    A builder belongs to exactly one entry; ``build`` returns an immutable
    MessageEntry with every collection deduplicated and sorted.
    """

    def __init__(self, context, identifier, allow_space_in_id=False):
        self.context = context or None
        if not allow_space_in_id:
            identifier = identifier.strip()
        self.identifier = identifier
        self.plural = None
        self.references = set()
        self.comments = set()
        self.flags = set()

    @classmethod
    def from_entry(cls, entry):
        builder = cls(entry.context, entry.identifier, allow_space_in_id=True)
        builder.merge(entry)
        return builder

    def set_plural(self, plural):
        if self.plural and plural and self.plural != plural:
            raise PluralConflictError(
                f"overwriting plural from '{self.plural}' to '{plural}' "
                f"for msgid '{self.identifier}'")
        self.plural = plural or self.plural
        return self

    def add_reference(self, filename, line):
        self.references.add(format_reference(filename, line))
        return self

    def add_comment(self, comment):
        self.comments.update(split_comment(comment))
        return self

    def add_flag(self, flag):
        self.flags.add(flag)
        return self

    def merge(self, entry):
        self.set_plural(entry.plural)
        self.references.update(entry.references)
        for comment in entry.comments:
            self.add_comment(comment)
        self.flags.update(entry.flags)
        return self

    def build(self):
        return MessageEntry(
            context=self.context,
            identifier=self.identifier,
            plural=self.plural,
            references=tuple(sorted(self.references)),
            comments=tuple(sorted(self.comments)),
            flags=tuple(sorted(self.flags)),
        )
