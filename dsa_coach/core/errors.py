from __future__ import annotations


class CoachError(Exception):
    """
    Base class for errors raised by the coaching backend.
    """


class ConfigurationError(CoachError):
    """
    A backend was invoked without the credential it needs.
    """


class UpstreamLookupFailure(CoachError):
    """
    The problem catalog could not answer a search or detail request.
    """


class ProblemNotFound(UpstreamLookupFailure):
    def __init__(self, title_slug: str) -> None:
        super().__init__(f"Problem '{title_slug}' was not found")
        self.title_slug = title_slug


class GenerationFailure(CoachError):
    """
    The selected LLM backend failed to produce a reply.

    Only the provider name is exposed; the vendor error is kept as ``__cause__``.
    """

    def __init__(self, provider: str, label: str | None = None) -> None:
        super().__init__(f"Failed to generate response from {label or provider.title()}")
        self.provider = provider
