"""Error types raised by the localizer engine."""

from pathlib import Path
from typing import Any, Dict, Optional, Union


class LocalizerError(Exception):
    """Base class for every localizer failure.

    Each error carries a short ``kind`` so the transport layer can report a
    structured failure instead of a bare message.
    """

    kind = 'localizer_error'

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to its JSON shape."""
        return {
            'kind': self.kind,
            'message': self.message,
        }


class InitializationError(LocalizerError):
    """Raised when the root, locale root or default locale directory is missing."""

    kind = 'initialization_error'


class ParseError(LocalizerError):
    """Raised when a locale file cannot be parsed by its format backend."""

    kind = 'parse_error'

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        line: Optional[int] = None,
        col: Optional[int] = None
    ):
        self.path = str(path) if path is not None else None
        self.line = line
        self.col = col

        location = ''
        if self.path:
            location = self.path
            if line is not None:
                location += f':{line}'
                if col is not None:
                    location += f':{col}'
            location += ': '

        super().__init__(f"{location}{message}")


class WriteError(LocalizerError):
    """Raised when an updated locale file cannot be written."""

    kind = 'write_error'


class DuplicateInitializationError(LocalizerError):
    """Raised when a second Localizer is created through the same host."""

    kind = 'duplicate_initialization'


class InvalidRequestError(LocalizerError):
    """Raised for locale, file or key input that is unsafe or malformed."""

    kind = 'invalid_request'
