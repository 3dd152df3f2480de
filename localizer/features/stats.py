"""Translation coverage statistics module."""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping

from ..utils.colors import Colors
from .diff import diff


def percentage(translated: int, lines: int) -> float:
    """Coverage percentage; a file without keys has 0 % coverage."""
    if not lines:
        return 0.0
    return 100 * translated / lines


@dataclass
class FileStats:
    """Dosya istatistikleri."""
    lines: int = 0
    translated: int = 0

    @property
    def percentage(self) -> float:
        return percentage(self.translated, self.lines)

    def to_dict(self) -> Dict[str, Any]:
        """Sözlüğe dönüştür."""
        return {
            'lines': self.lines,
            'translated': self.translated,
            'percentage': self.percentage,
        }


@dataclass
class LocaleStats:
    """Dil istatistikleri."""
    locale: str
    files: Dict[str, FileStats] = field(default_factory=dict)  # file -> stats

    @property
    def lines(self) -> int:
        return sum(stats.lines for stats in self.files.values())

    @property
    def translated(self) -> int:
        return sum(stats.translated for stats in self.files.values())

    @property
    def percentage(self) -> float:
        return percentage(self.translated, self.lines)

    def to_dict(self) -> Dict[str, Any]:
        """Sözlüğe dönüştür."""
        return {
            'lines': self.lines,
            'translated': self.translated,
            'percentage': self.percentage,
            'files': {name: stats.to_dict() for name, stats in self.files.items()},
        }


class StatsCalculator:
    """
    Çeviri kapsama hesaplayıcısı.

    Özellikler:
    - Dosya başına key ve çeviri sayıları
    - Dil başına toplam kapsama yüzdesi
    - Konsol, JSON ve Markdown çıktısı
    """

    def __init__(self, default_locale: str = 'en'):
        """
        İstatistik hesaplayıcıyı başlat.

        Args:
            default_locale: Varsayılan dil kodu
        """
        self.default_locale = default_locale

    def calculate_file(self, default: Mapping[str, str], target: Mapping[str, str]) -> FileStats:
        """
        Tek bir dosyanın istatistiklerini hesapla.

        Args:
            default: Flat strings of the default locale file
            target: Flat strings of the same file in the target locale
        """
        return FileStats(lines=len(default), translated=len(diff(default, target)))

    def calculate(
        self,
        locale: str,
        index: Mapping[str, Mapping[str, str]],
        strings: Mapping[str, Mapping[str, str]]
    ) -> LocaleStats:
        """
        Bir dilin tüm istatistiklerini hesapla.

        Args:
            locale: Target locale
            index: {file: flat strings} of the default locale
            strings: {file: flat strings} of the target locale; files
                absent here count as untranslated

        Returns:
            LocaleStats
        """
        stats = LocaleStats(locale=locale)
        for file, default in index.items():
            stats.files[file] = self.calculate_file(default, strings.get(file, {}))
        return stats

    def print_summary(self, stats: Mapping[str, LocaleStats]):
        """Özet istatistikleri yazdır."""
        print(f"\n{Colors.bold('📊 TRANSLATION COVERAGE')}")
        print("=" * 70)
        print(f"Default locale: {self.default_locale}")
        print()

        if not stats:
            print(f"  {Colors.warning('No locales found besides the default locale')}")
            return

        for locale, locale_stats in stats.items():
            status = Colors.success('✓') if locale_stats.percentage >= 100 else (
                Colors.warning('◐') if locale_stats.percentage >= 80 else Colors.error('○')
            )

            print(f"  {status} {Colors.bold(locale)}")
            print(f"     {self._completion_bar(locale_stats.percentage)}")
            print(f"     Keys: {locale_stats.translated}/{locale_stats.lines}")

            for file, file_stats in locale_stats.files.items():
                print(
                    f"       • {file}: {file_stats.translated}/{file_stats.lines} "
                    f"({file_stats.percentage:.1f}%)"
                )
            print()

    def _completion_bar(self, percent: float, width: int = 20) -> str:
        """Tamamlanma çubuğu oluştur."""
        filled = int(width * percent / 100)
        empty = width - filled
        bar = Colors.for_percentage(percent)('█' * filled) + '░' * empty
        return f"[{bar}] {percent:.1f}%"

    def export_json(self, stats: Mapping[str, LocaleStats], output_path: Path):
        """JSON dosyasına dışa aktar."""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'generated_at': datetime.now().isoformat(),
            'default_locale': self.default_locale,
            'locales': {locale: locale_stats.to_dict() for locale, locale_stats in stats.items()},
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        print(f"{Colors.success('✓')} Stats exported to: {output_path}")

    def export_markdown(self, stats: Mapping[str, LocaleStats], output_path: Path):
        """Markdown dosyasına dışa aktar."""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        lines = [
            "# Translation Coverage",
            "",
            f"**Generated:** {datetime.now().isoformat()}",
            f"**Default Locale:** {self.default_locale}",
            "",
            "| Locale | Keys | Translated | Coverage |",
            "|--------|------|------------|----------|",
        ]

        for locale, locale_stats in stats.items():
            status = "✅" if locale_stats.percentage >= 100 else (
                "🔶" if locale_stats.percentage >= 80 else "❌"
            )
            lines.append(
                f"| {status} {locale} | {locale_stats.lines} | "
                f"{locale_stats.translated} | {locale_stats.percentage:.1f}% |"
            )

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write('\n'.join(lines) + '\n')

        print(f"{Colors.success('✓')} Stats exported to: {output_path}")
