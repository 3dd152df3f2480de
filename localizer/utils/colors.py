"""ANSI color codes for terminal output."""

from typing import Callable


class Colors:
    """ANSI color codes for terminal output."""

    HEADER = '\033[95m'
    OKBLUE = '\033[94m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    DIM = '\033[2m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'

    @classmethod
    def success(cls, text: str) -> str:
        return f"{cls.OKGREEN}{text}{cls.ENDC}"

    @classmethod
    def error(cls, text: str) -> str:
        return f"{cls.FAIL}{text}{cls.ENDC}"

    @classmethod
    def warning(cls, text: str) -> str:
        return f"{cls.WARNING}{text}{cls.ENDC}"

    @classmethod
    def info(cls, text: str) -> str:
        return f"{cls.OKCYAN}{text}{cls.ENDC}"

    @classmethod
    def bold(cls, text: str) -> str:
        return f"{cls.BOLD}{text}{cls.ENDC}"

    @classmethod
    def dim(cls, text: str) -> str:
        """Return text dimmed, used for source excerpts."""
        return f"{cls.DIM}{text}{cls.ENDC}"

    @classmethod
    def for_percentage(cls, percent: float) -> Callable[[str], str]:
        """Pick the color of a coverage value: green when complete, yellow from 80 %."""
        if percent >= 100:
            return cls.success
        if percent >= 80:
            return cls.warning
        return cls.error
