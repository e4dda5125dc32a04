"""Custom exception hierarchy for ranktok encoding errors."""

import regex as re


class RankTokError(Exception):
    """Base exception for all ranktok errors."""


class SpecialTokenError(RankTokError):
    """Raised when special token handling fails."""

    def __init__(self, message: str, *, found_tokens: set[str] | None = None) -> None:
        """Initialize with optional found_tokens that get appended to the message."""
        if found_tokens:
            message = f"{message} (found: {', '.join(sorted(found_tokens))})"
        super().__init__(message)
        self.found_tokens = found_tokens


class DisallowedSpecialTokenError(SpecialTokenError):
    """Raised when text to be encoded contains a disallowed special token."""

    def __init__(self, message: str, *, token: str) -> None:
        super().__init__(message, found_tokens={token})
        self.token = token


class VocabularyError(RankTokError):
    """Raised when vocabulary construction fails."""

    def __init__(
        self,
        message: str,
        *,
        missing_bytes: list[int] | None = None,
    ) -> None:
        """Initialize with optional missing byte values that get appended to the message."""
        extra = ""
        # only show a prefix, a broken table can miss all 256 bytes
        if missing_bytes:
            shown = ", ".join(str(b) for b in missing_bytes[:8])
            if len(missing_bytes) > 8:
                shown += ", ..."
            extra = f" (missing bytes: {shown})"
        super().__init__(message + extra)
        self.missing_bytes = missing_bytes


class MalformedVocabularyError(VocabularyError):
    """Raised when serialized rank data cannot be parsed."""

    def __init__(
        self,
        message: str,
        *,
        line_no: int | None = None,
        line: str | None = None,
    ) -> None:
        extra = ""
        if line_no is not None:
            extra += f" (line: {line_no})"
        if line is not None:
            extra += f" (content: {line[:60]!r})"
        super().__init__(message + extra)
        self.line_no = line_no
        self.line = line


class ModelLoadError(RankTokError):
    """Raised when loading an encoding data file fails."""

    def __init__(
        self,
        message: str,
        *,
        model_path: str | None = None,
    ) -> None:
        extra = ""
        if model_path:
            extra += f" (path: {model_path})"
        super().__init__(message + extra)
        self.model_path = model_path


class PatternError(RankTokError):
    """Raised when compiling and/or looking up regex patterns."""

    def __init__(
        self,
        message: str,
        *,
        pattern: str | None = None,
        regex_err: re.error | None = None,
    ) -> None:
        """
        Initialize PatternError with pattern details.

        Args:
            message: Error message.
            pattern: The regex pattern that failed.
            regex_err: The underlying regex error from the regex library.
        """
        extra = ""
        if pattern:
            extra += f" (pattern: {pattern!r})"
        if regex_err:
            extra += f" (reason: {regex_err})"
        super().__init__(message + extra)
        self.pattern = pattern
        self.regex_err = regex_err


class EncodingNameError(RankTokError):
    """Raised when a model or encoding name is not known."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = ""
        if invalid_name:
            extra += f" (got {invalid_name!r})"
        if available:
            extra += f" (available: {', '.join(available)})"
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available
