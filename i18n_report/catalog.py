import polib

from .errors import AmbiguousContextError, CatalogError
from .message import (MessageEntryBuilder, isolate_filename, iter_references,
                      parse_reference)


class MessageCatalog:
    """
    PO-style catalog of extracted messages, keyed by context then msgid.
    The empty context is the default bucket.
    """

    def __init__(self, domain="messages"):
        self.domain = domain
        self.translations = {}

    def find(self, context, identifier):
        """
        Return the entry for ``(context, identifier)`` or None.

        Heuristic: in a named context whose only entry has another msgid,
        that entry is returned, as if the context alone were the key. A
        context with several entries cannot be resolved this way and raises
        AmbiguousContextError. This can hide a duplicated key written by
        mistake, so it is not a guaranteed-correct match.
        """
        context = context or ""
        entries = self.translations.get(context)
        if not entries:
            return None
        if not context or identifier in entries:
            return entries.get(identifier)
        if len(entries) > 1:
            raise AmbiguousContextError(
                f"multiple msgid in msgctxt '{context}': "
                + ", ".join(sorted(entries)))
        return next(iter(entries.values()))

    def _store(self, entry):
        self.translations.setdefault(entry.context or "", {})[
            entry.identifier] = entry
        return entry

    def upsert(self, entry):
        """Add ``entry`` or merge it into the entry it matches."""
        existing = self.find(entry.context, entry.identifier)
        if existing is None:
            return self._store(MessageEntryBuilder.from_entry(entry).build())
        builder = MessageEntryBuilder.from_entry(existing)
        return self._store(builder.merge(entry).build())

    def add_message(self, filename, line, identifier, plural=None,
                    comment=None, context=None, allow_space_in_id=False):
        builder = MessageEntryBuilder(context, identifier,
                                      allow_space_in_id=allow_space_in_id)
        if not builder.identifier:
            return None
        builder.add_reference(filename, line)
        if plural:
            builder.set_plural(plural)
        if comment:
            builder.add_comment(comment)
        return self.upsert(builder.build())

    def __iter__(self):
        for context, entries in self.translations.items():
            for identifier, entry in entries.items():
                if not context and not identifier:
                    continue
                yield entry

    def __len__(self):
        return sum(1 for _ in self)

    def sorted_entries(self):
        return sorted(self, key=lambda entry: entry.key)

    def to_pofile(self):
        pofile = polib.POFile()
        pofile.metadata = {
            "Project-Id-Version": self.domain,
            "MIME-Version": "1.0",
            "Content-Type": "text/plain; charset=utf-8",
            "Content-Transfer-Encoding": "8bit",
        }
        for entry in self.sorted_entries():
            po_entry = polib.POEntry(
                msgctxt=entry.context,
                msgid=entry.identifier,
                occurrences=[(isolate_filename(filename), line) for
                             filename, line in map(parse_reference,
                                                   entry.references)],
                comment="\n".join(entry.comments),
                flags=list(entry.flags),
            )
            if entry.plural:
                po_entry.msgid_plural = entry.plural
                po_entry.msgstr_plural = {0: "", 1: ""}
            pofile.append(po_entry)
        return pofile

    def serialize(self):
        return str(self.to_pofile())

    @classmethod
    def deserialize(cls, text):
        try:
            pofile = polib.pofile(text)
        except OSError as err:
            raise CatalogError(f"cannot parse catalog: {err}") from err

        catalog = cls(pofile.metadata.get("Project-Id-Version", "messages"))
        for po_entry in pofile:
            if po_entry.obsolete:
                continue
            if not po_entry.msgctxt and not po_entry.msgid:
                continue
            builder = MessageEntryBuilder(po_entry.msgctxt, po_entry.msgid,
                                          allow_space_in_id=True)
            for reference in iter_references(po_entry.occurrences):
                builder.add_reference(*parse_reference(reference))
            if po_entry.msgid_plural:
                builder.set_plural(po_entry.msgid_plural)
            if po_entry.comment:
                builder.add_comment(po_entry.comment)
            for flag in po_entry.flags:
                builder.add_flag(flag)
            key = (builder.context or "", builder.identifier)
            existing = catalog.translations.get(key[0], {}).get(key[1])
            if existing is not None:
                builder.merge(existing)
            catalog._store(builder.build())
        return catalog
