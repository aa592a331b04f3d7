class I18nReportError(Exception):
    """Base class for every error raised by i18n_report."""


class EvaluationError(I18nReportError):
    """An expression cannot be reduced to string literals."""


class CatalogError(I18nReportError):
    """The message catalog is inconsistent."""


class AmbiguousContextError(CatalogError):
    pass


class PluralConflictError(CatalogError):
    pass


class MalformedReferenceError(CatalogError):
    pass


class LanguageFileError(I18nReportError):
    """A language file exists but cannot be parsed."""


class ConfigurationError(I18nReportError):
    """Invalid options or unreadable input locations."""
