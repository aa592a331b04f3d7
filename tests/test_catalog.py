import pytest

from i18n_report.catalog import MessageCatalog
from i18n_report.errors import (AmbiguousContextError,
                                MalformedReferenceError, PluralConflictError)
from i18n_report.message import (MessageEntry, MessageEntryBuilder,
                                 parse_reference)


@pytest.fixture
def catalog():
    catalog = MessageCatalog("demo")
    catalog.add_message("b.js", 7, "Save")
    catalog.add_message("a.js", 3, "Save")
    catalog.add_message("menu.html", 2, "Open", plural="Open all",
                        comment="File menu\nShown twice", context="menu")
    catalog.add_message("app.vue", 10, "Quit \"now\"")
    return catalog


def test_references_are_merged_and_sorted(catalog):
    entry = catalog.find(None, "Save")
    assert entry.references == ("a.js:3", "b.js:7")
    assert len(catalog) == 3


def test_builder_splits_comments_and_sorts():
    builder = MessageEntryBuilder("", "  id  ")
    builder.add_comment("b\na").add_reference("z.js", 1).add_flag("fuzzy")
    entry = builder.build()
    assert entry == MessageEntry(None, "id", None, ("z.js:1",), ("a", "b"),
                                 ("fuzzy",))


def test_upsert_is_idempotent(catalog):
    entry = catalog.find("menu", "Open")
    before = catalog.sorted_entries()
    catalog.upsert(entry)
    catalog.upsert(entry)
    assert catalog.sorted_entries() == before


def test_plural_conflict():
    catalog = MessageCatalog()
    catalog.add_message("a.js", 1, "File", plural="Files")
    catalog.add_message("a.js", 2, "File", plural="Files")
    with pytest.raises(PluralConflictError):
        catalog.add_message("a.js", 3, "File", plural="Filez")


def test_single_entry_context_matches_other_identifier(catalog):
    entry = catalog.add_message("b.html", 4, "Ouvrir", context="menu")
    assert entry.identifier == "Open"
    assert entry.references == ("b.html:4", "menu.html:2")
    assert len(catalog) == 3


def test_ambiguous_context(catalog):
    catalog.translations["menu"]["Close"] = MessageEntry("menu", "Close")
    with pytest.raises(AmbiguousContextError):
        catalog.find("menu", "Print")
    assert catalog.find("menu", "Close").identifier == "Close"


def test_serialize(catalog):
    text = catalog.serialize()
    assert '"Project-Id-Version: demo\\n"' in text
    assert "#: a.js:3 b.js:7\nmsgid \"Save\"" in text
    assert "#. File menu\n#. Shown twice\n" in text
    assert 'msgctxt "menu"' in text
    assert 'msgid_plural "Open all"' in text
    assert 'msgid "Quit \\"now\\""' in text
    # default context first, then by identifier
    assert text.index('msgid "Quit') < text.index('msgid "Save"') \
        < text.index('msgctxt "menu"')


def test_round_trip(catalog):
    catalog.add_message("c.js", 1, "flagged")
    builder = MessageEntryBuilder.from_entry(catalog.find(None, "flagged"))
    catalog.upsert(builder.add_flag("c-format").build())

    restored = MessageCatalog.deserialize(catalog.serialize())

    assert restored.domain == "demo"
    assert restored.sorted_entries() == catalog.sorted_entries()
    assert restored.serialize() == catalog.serialize()


@pytest.mark.parametrize("reference", ["nofile", "a.js:x", ":12"])
def test_malformed_reference(reference):
    text = f'#: {reference}\nmsgid "x"\nmsgstr ""\n'
    with pytest.raises(MalformedReferenceError):
        MessageCatalog.deserialize(text)


def test_parse_reference():
    assert parse_reference("src/a b.js:12") == ("src/a b.js", 12)


def test_upsert_normalizes_new_entries():
    raw = MessageEntry("", "x", references=("b.js:1", "a.js:2", "a.js:2"),
                       comments=("z", "a\nb"))
    once = MessageCatalog()
    once.upsert(raw)
    twice = MessageCatalog()
    twice.upsert(raw)
    twice.upsert(raw)

    entry, = once.sorted_entries()
    assert entry == MessageEntry(None, "x", None, ("a.js:2", "b.js:1"),
                                 ("a", "b", "z"))
    assert twice.sorted_entries() == once.sorted_entries()
    assert "#: a.js:2 b.js:1\n" in once.serialize()


def test_round_trip_of_raw_entries():
    catalog = MessageCatalog()
    catalog.upsert(MessageEntry("", "k", references=("b.js:2", "a.js:1")))
    catalog.upsert(MessageEntry("ctx", "m", comments=("two\none",)))

    restored = MessageCatalog.deserialize(catalog.serialize())

    assert restored.sorted_entries() == catalog.sorted_entries()


def test_file_names_with_spaces_survive_a_round_trip():
    catalog = MessageCatalog()
    catalog.add_message("src/my page.vue", 3, "k")
    catalog.add_message("src/a.js", 1, "k")
    for line in range(1, 8):
        catalog.add_message(f"src/components/some long folder/view {line}.vue",
                            line, "k")

    text = catalog.serialize()
    assert "\u2068src/my page.vue\u2069:3" in text

    restored = MessageCatalog.deserialize(text)
    assert restored.sorted_entries() == catalog.sorted_entries()
    assert "src/my page.vue:3" in restored.find(None, "k").references
