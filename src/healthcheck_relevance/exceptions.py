"""Errors raised by the relevance engine.

Predicates never raise. Everything here is either a start-up configuration
bug or a dispatch-time programming error surfaced by the registry.
"""


class RelevanceError(Exception):
    """Base class for relevance engine errors."""


class ConfigurationError(RelevanceError, ValueError):
    """The predicate registry was wired incorrectly."""


class DuplicatePredicateError(ConfigurationError):
    def __init__(self, kind) -> None:
        super().__init__(f"predicate for kind '{kind}' already registered")
        self.kind = kind


class UnknownKindError(ConfigurationError):
    def __init__(self, kind) -> None:
        super().__init__(f"no predicate registered for kind '{kind}'")
        self.kind = kind


class RegistryFrozenError(ConfigurationError):
    """Raised when registering after the registry has been frozen."""
