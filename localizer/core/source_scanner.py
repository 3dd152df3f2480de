"""Scanner for localization key references in source files."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

log = logging.getLogger(__name__)

# Characters allowed in a referenced key path (matched case-insensitively)
KEY_CHARS = frozenset('abcdefghijklmnopqrstuvwxyz._-')

SEPARATOR = '::'


@dataclass(frozen=True)
class SourceChunk:
    """One occurrence of a key reference in a source file."""
    file: str  # Locale file, e.g. "lang.php"
    path: str  # Key inside the locale file, e.g. "menu.save"
    full: str  # Full dotted path, e.g. "lang.menu.save"
    source: str  # Source file relative to the root
    line: int  # 1-based
    col: int  # 0-based
    index: int  # Character offset in the normalized source text
    excerpt: str
    excerpt_focus: Tuple[int, int]

    @property
    def focus_text(self) -> str:
        """Token text marked by the focus span."""
        start, end = self.excerpt_focus
        return self.excerpt[start:end]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape consumed by dashboards."""
        return {
            'locale': {
                'file': self.file,
                'path': self.path,
                'full': self.full,
            },
            'source': self.source,
            'line': self.line,
            'col': self.col,
            'index': self.index,
            'excerpt': self.excerpt,
            'excerptFocus': list(self.excerpt_focus),
        }


@dataclass(frozen=True)
class TokenMatch:
    """A `<namespace>::<dotted.path>` token found in text."""
    index: int
    end: int
    path: str


def normalize_newlines(content: str) -> str:
    """Convert \\r\\n and \\r line endings to \\n."""
    return content.replace('\r\n', '\n').replace('\r', '\n')


def _is_key_char(char: str) -> bool:
    return char.isascii() and char.lower() in KEY_CHARS


def find_references(content: str, namespace: str) -> Iterator[TokenMatch]:
    """
    Find every `<namespace>::<dotted.path>` token in text.

    The namespace is compared case-insensitively. The path is the longest
    run of letters, dots, underscores and hyphens after the separator; a
    separator with no path after it is not a reference.

    Args:
        content: Source text (newlines already normalized)
        namespace: Reference namespace, e.g. "acme.blog"

    Yields:
        TokenMatch objects in text order
    """
    namespace = namespace.lower()
    length = len(content)
    pos = 0

    while True:
        separator = content.find(SEPARATOR, pos)
        if separator == -1:
            return

        start = separator - len(namespace)
        path_start = separator + len(SEPARATOR)
        if start < 0 or content[start:separator].lower() != namespace:
            pos = separator + 1
            continue

        end = path_start
        while end < length and _is_key_char(content[end]):
            end += 1

        if end == path_start:
            pos = path_start
            continue

        yield TokenMatch(index=start, end=end, path=content[path_start:end])
        pos = end


def has_reference_marker(content: str, namespace: str) -> bool:
    """Quick check for `<namespace>::` anywhere in the text."""
    return f"{namespace}{SEPARATOR}".lower() in content.lower()


def build_excerpt(content: str, index: int, token_length: int) -> Tuple[str, Tuple[int, int], int, int]:
    """
    Build the de-indented excerpt around a token.

    The excerpt holds the line before the token's line, the token's line and
    the line after it. Lines missing at file boundaries are left out. The
    smallest indentation among the non-blank lines is removed from every line.

    Args:
        content: Source text
        index: Offset of the token
        token_length: Length of the token

    Returns:
        (excerpt, (focus_start, focus_end), line, col)
    """
    line_start = content.rfind('\n', 0, index) + 1
    line_end = content.find('\n', index)
    if line_end == -1:
        line_end = len(content)

    previous: Optional[str] = None
    if line_start > 0:
        previous_start = content.rfind('\n', 0, line_start - 1) + 1
        previous = content[previous_start:line_start - 1]

    following: Optional[str] = None
    # A newline that ends the file does not start another line
    if line_end < len(content) - 1:
        following_end = content.find('\n', line_end + 1)
        if following_end == -1:
            following_end = len(content)
        following = content[line_end + 1:following_end]

    current = content[line_start:line_end]
    lines = [line for line in (previous, current, following) if line is not None]

    indents = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    strip = min(indents) if indents else 0
    stripped = [line[strip:] for line in lines]

    offset = len(stripped[0]) + 1 if previous is not None else 0
    col = index - line_start
    focus_start = offset + col - strip

    line = content.count('\n', 0, index) + 1
    return '\n'.join(stripped), (focus_start, focus_start + token_length), line, col


class SourceScanner:
    """
    Collects key references from the project's source files.

    Files come from glob patterns relative to the root; every reference is
    indexed under its full dotted path in discovery order.
    """

    def __init__(
        self,
        root: Path,
        namespace: str,
        patterns: Sequence[str],
        extension: str = '.php',
    ):
        """
        Initialize scanner.

        Args:
            root: Project root directory
            namespace: Reference namespace, e.g. "acme.blog"
            patterns: Glob patterns of the files to scan
            extension: Locale file extension appended to the file segment
        """
        self.root = Path(root)
        self.namespace = namespace
        self.patterns = list(patterns)
        self.extension = extension
        self.sources: Dict[str, List[SourceChunk]] = {}
        self.scanned_files: List[str] = []

    def discover_files(self) -> List[Path]:
        """Expand the glob patterns; order is pattern order, sorted per pattern."""
        seen = set()
        files: List[Path] = []

        for pattern in self.patterns:
            for file_path in sorted(self.root.glob(pattern)):
                if not file_path.is_file() or file_path in seen:
                    continue
                seen.add(file_path)
                files.append(file_path)

        return files

    def scan(self) -> Dict[str, List[SourceChunk]]:
        """
        Scan all source files and rebuild the source index.

        Returns:
            Source index (full dotted path -> chunks)
        """
        self.sources = {}
        self.scanned_files = []

        for file_path in self.discover_files():
            content = self._read_source(file_path)
            if content is None:
                continue

            self.scanned_files.append(self._relative(file_path))
            for chunk in self.scan_text(content, self._relative(file_path)):
                self.sources.setdefault(chunk.full, []).append(chunk)

        total = sum(len(chunks) for chunks in self.sources.values())
        log.info(
            "Scanned %d files, found %d references to %d keys",
            len(self.scanned_files), total, len(self.sources)
        )
        return self.sources

    def scan_text(self, content: str, source: str) -> List[SourceChunk]:
        """
        Find all references in one source text.

        Args:
            content: Source text
            source: Name recorded as the chunk's source file

        Returns:
            Chunks in occurrence order
        """
        content = normalize_newlines(content)
        if not has_reference_marker(content, self.namespace):
            return []

        chunks = []
        for match in find_references(content, self.namespace):
            file_segment, _, key_path = match.path.partition('.')
            excerpt, focus, line, col = build_excerpt(content, match.index, match.end - match.index)

            chunks.append(SourceChunk(
                file=f"{file_segment}{self.extension}",
                path=key_path,
                full=match.path,
                source=source,
                line=line,
                col=col,
                index=match.index,
                excerpt=excerpt,
                excerpt_focus=focus,
            ))

        return chunks

    def references(self, key: str) -> List[SourceChunk]:
        """Chunks referencing a full dotted key (empty list when unused)."""
        return list(self.sources.get(key, []))

    def _read_source(self, file_path: Path) -> Optional[str]:
        try:
            with open(file_path, 'r', encoding='utf-8', newline='') as f:
                return normalize_newlines(f.read())
        except UnicodeDecodeError:
            log.warning("Skipping non UTF-8 source file: %s", file_path)
        except OSError as e:
            log.warning("Cannot read source file %s: %s", file_path, e)
        return None

    def _relative(self, file_path: Path) -> str:
        try:
            return file_path.relative_to(self.root).as_posix()
        except ValueError:
            return file_path.as_posix()
