"""Console report generator."""

from typing import Dict, List, Optional

from ..core.localizer import FileStrings
from ..core.source_scanner import SourceChunk
from ..features.diff import KeyStatus
from ..utils.colors import Colors

STATUS_ICONS = {
    KeyStatus.TRANSLATED.value: '✅',
    KeyStatus.UNTRANSLATED.value: '⚠️ ',
    KeyStatus.MISSING.value: '🔴',
}


class ConsoleReporter:
    """Print locale strings and key references to the terminal."""

    @staticmethod
    def print_strings(
        strings: Dict[str, FileStrings],
        locale: str,
        status: Optional[str] = None,
        show_references: bool = False
    ):
        """
        Print the strings of a locale file by file.

        Args:
            strings: Result of Localizer.fetch_strings()
            locale: Target locale
            status: Only print keys with this status
            show_references: Print the source location of every reference
        """
        ConsoleReporter._print_header(f'🌍 STRINGS ({locale})')

        for file, file_strings in strings.items():
            keys = [
                key for key, key_status in file_strings.status.items()
                if status is None or key_status == status
            ]

            print(f"\n{Colors.bold(file)} "
                  f"({file_strings.count(KeyStatus.TRANSLATED.value)}/{len(file_strings.status)} translated)")
            print("-" * 70)

            if not keys:
                print("  Nothing to show")
                continue

            for key in keys:
                key_status = file_strings.status[key]
                print(f"  {STATUS_ICONS.get(key_status, '•')} {Colors.bold(key)}")
                print(f"     {Colors.dim('default:')} {file_strings.defaults[key]}")
                if file_strings.values[key]:
                    print(f"     {Colors.dim(locale + ':')} {file_strings.values[key]}")

                references = file_strings.references.get(key, [])
                if show_references:
                    for chunk in references:
                        print(f"     {Colors.info('↳')} {chunk.source}:{chunk.line}:{chunk.col}")
                elif not references:
                    print(f"     {Colors.warning('not referenced in sources')}")

        print()

    @staticmethod
    def print_references(key: str, chunks: List[SourceChunk]):
        """
        Print every reference of a key with its highlighted excerpt.

        Args:
            key: Full dotted key, e.g. "lang.menu.save"
            chunks: References of the key
        """
        ConsoleReporter._print_header(f'🔎 REFERENCES OF {key}')

        if not chunks:
            print(f"{Colors.warning('No references found')}\n")
            return

        for i, chunk in enumerate(chunks, 1):
            print(f"\n{i}. {Colors.info(chunk.source)}:{chunk.line}:{chunk.col}")
            print(ConsoleReporter._highlight(chunk))

        print()

    @staticmethod
    def _highlight(chunk: SourceChunk, indent: str = '   ') -> str:
        """Excerpt with the referenced token in bold."""
        start, end = chunk.excerpt_focus
        text = (
            chunk.excerpt[:start]
            + Colors.bold(Colors.success(chunk.excerpt[start:end]))
            + chunk.excerpt[end:]
        )
        return '\n'.join(f"{indent}{line}" for line in text.split('\n'))

    @staticmethod
    def _print_header(title: str):
        print("\n" + "=" * 70)
        print(f"{Colors.bold(title)}")
        print("=" * 70)
