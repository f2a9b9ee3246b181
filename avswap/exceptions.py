"""
avswap.exceptions - Custom exception classes.

All avswap-specific exceptions inherit from AvswapError.
"""


class AvswapError(Exception):
    """Base exception for all avswap errors."""

    pass


class ConfigError(AvswapError):
    """Configuration loading or validation error.

    ``field`` names the offending setting when the error came from validation.
    """

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ValidationError(AvswapError):
    """Input directory or file validation error."""

    pass


class FFmpegError(AvswapError):
    """FFmpeg exited with a non-zero status."""

    def __init__(self, returncode: int, stderr: str, message: str | None = None):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"FFmpeg exited with status {returncode}: {stderr}")


class ExtractionError(AvswapError):
    """Audio extraction error."""

    pass


class MergeError(AvswapError):
    """Audio replacement error."""

    pass


class DependencyError(AvswapError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
