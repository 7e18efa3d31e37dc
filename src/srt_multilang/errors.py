"""Exception types raised by the translation pipeline."""

from __future__ import annotations


class TranslatorError(Exception):
    """Base class for all translation pipeline errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidDocument(TranslatorError):
    """The input did not yield any subtitle entry."""

    def __init__(self, message: str = "The file does not seem to be a valid SRT file or is empty."):
        super().__init__(message)


class MalformedTranslationOutput(TranslatorError):
    """The backend returned a different number of segments than it was sent."""

    def __init__(self, expected: int, received: int):
        super().__init__(
            "Translation output was malformed. "
            f"Expected {expected} subtitle blocks, but received {received}."
        )
        self.expected = expected
        self.received = received


class BackendUnavailable(TranslatorError):
    """Transport or service failure while talking to the translation backend."""


class MissingCredential(TranslatorError):
    """No API key is configured for the translation backend."""

    def __init__(self, message: str = "API key is required. Set DEEPSEEK_API_KEY or use --api-key"):
        super().__init__(message)
