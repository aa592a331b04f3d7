"""Extract i18n keys from Vue, JS, TS, PHP and HTML sources and compare them
against per-language translation files."""

__version__ = "1.0.0"

# Placeholder written into a language file for a key that is known to exist
# but has no translation yet. The reader side treats the same value as
# "present but untranslated".
MISSING_TRANSLATION_VALUE = "__MISSING_TRANSLATION__"
