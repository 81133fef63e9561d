"""Exceptions raised while translating an event."""


class TranslationError(Exception):
    """An event cannot be translated; the whole event is dropped."""

    pass


class PreconditionError(TranslationError):
    """An event violates the shape its operation kind guarantees."""

    pass
