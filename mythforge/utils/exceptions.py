"""Centralized exception hierarchy for Mythforge.

Exception Hierarchy:

    MythForgeError (base for all application errors)
    ├── ConfigError (configuration parsing/persistence failures)
    └── JSONParseError (strict-mode JSON recovery failures)

Recovery and validation report failure through return values; these
exceptions are raised only by opt-in strict modes and configuration code.

Usage:
    from mythforge.utils.exceptions import JSONParseError

    try:
        data = parse_with_strategies(raw_text, strict=True)
    except JSONParseError as e:
        logger.error("Nothing recoverable: %s", e.response_preview)
"""


class MythForgeError(Exception):
    """Base exception for all Mythforge errors.

    All custom exceptions should inherit from this class to allow
    catching all application-specific errors with a single except clause.
    """

    pass


class ConfigError(MythForgeError):
    """Raised when settings cannot be read or persisted."""

    pass


class JSONParseError(MythForgeError):
    """Raised when no JSON structure can be recovered from generated text.

    Attributes:
        response_preview: First 500 chars of the raw response for debugging.
        expected_type: Description of the expected JSON structure.
    """

    def __init__(
        self,
        message: str,
        response_preview: str | None = None,
        expected_type: str | None = None,
    ):
        """Initialize the JSONParseError with an error message and parsing context.

        Args:
            message: Human-readable error message describing the parse failure.
            response_preview: Optional preview of the raw response that failed to parse.
            expected_type: Optional description of the expected JSON structure.
        """
        super().__init__(message)
        self.response_preview = response_preview
        self.expected_type = expected_type
