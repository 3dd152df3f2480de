"""Locale diff module - compare a locale against the default locale."""

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..utils.colors import Colors

LEADING_NUMBER = re.compile(r'[0-9]+(\s+)?')
TOKEN_SEPARATOR = re.compile(r'[ -]')

# Values with at most this many tokens may stay identical across locales
SHORT_LITERAL_TOKENS = 2


class KeyStatus(str, Enum):
    """Bir key'in hedef dildeki durumu."""
    MISSING = "missing"            # Hedef dilde yok
    TRANSLATED = "translated"      # Çevrilmiş (ya da marka / kısa değer)
    UNTRANSLATED = "untranslated"  # Varsayılan dil ile aynı


def is_short_literal(value: str) -> bool:
    """
    Değerin marka, özel isim ya da kısa bir ifade olup olmadığını kontrol et.

    The first run of digits (and the whitespace after it) is removed, then
    the value is split on spaces and hyphens. Two tokens or fewer ("Acme",
    "Acme Corp", "404 Not-Found") may legitimately repeat verbatim in a
    translation.
    """
    stripped = LEADING_NUMBER.sub('', value, count=1)
    return len(TOKEN_SEPARATOR.split(stripped)) <= SHORT_LITERAL_TOKENS


def diff(default: Mapping[str, str], target: Mapping[str, str]) -> Dict[str, str]:
    """
    Hedef dilde gerçekten çevrilmiş key'leri bul.

    A target entry counts when its key exists in the default locale and its
    value either differs from the default or is a short literal. Entries
    equal to the default (and longer than a short literal) are left out, as
    are keys the default locale does not have.

    Args:
        default: Flat strings of the default locale
        target: Flat strings of the target locale

    Returns:
        Subset of ``target`` holding the meaningful translations
    """
    result = {}
    for key, value in target.items():
        # Target-only keys translate nothing; keeps coverage at or below 100 %
        if key not in default:
            continue
        if value == default[key] and not is_short_literal(value):
            continue
        result[key] = value
    return result


def key_status(default_value: str, target: Mapping[str, str], key: str) -> KeyStatus:
    """
    Tek bir key'in durumunu hesapla.

    Args:
        default_value: Value in the default locale
        target: Flat strings of the target locale
        key: Dotted key

    Returns:
        KeyStatus
    """
    if key not in target:
        return KeyStatus.MISSING
    if target[key] != default_value or is_short_literal(target[key]):
        return KeyStatus.TRANSLATED
    return KeyStatus.UNTRANSLATED


@dataclass
class DiffEntry:
    """Tek bir fark kaydı."""
    key: str
    status: str
    default_value: Optional[str] = None
    target_value: Optional[str] = None


@dataclass
class DiffResult:
    """Diff sonucu."""
    default_locale: str
    target_locale: str
    missing: List[DiffEntry] = field(default_factory=list)       # Varsayılanda var, hedefte yok
    translated: List[DiffEntry] = field(default_factory=list)    # Çevrilmiş
    untranslated: List[DiffEntry] = field(default_factory=list)  # Aynı değer
    extra: List[DiffEntry] = field(default_factory=list)         # Hedefte var, varsayılanda yok

    @property
    def total_keys(self) -> int:
        return len(self.missing) + len(self.translated) + len(self.untranslated)

    @property
    def percentage(self) -> float:
        if not self.total_keys:
            return 0.0
        return 100 * len(self.translated) / self.total_keys

    @property
    def is_complete(self) -> bool:
        return not self.missing and not self.untranslated

    def to_dict(self) -> Dict:
        """Sözlüğe dönüştür."""
        return {
            'default_locale': self.default_locale,
            'target_locale': self.target_locale,
            'summary': {
                'missing': len(self.missing),
                'translated': len(self.translated),
                'untranslated': len(self.untranslated),
                'extra': len(self.extra),
                'percentage': round(self.percentage, 2),
            },
            'missing': [{'key': e.key, 'value': e.default_value} for e in self.missing],
            'untranslated': [{'key': e.key, 'value': e.default_value} for e in self.untranslated],
            'translated': [
                {'key': e.key, 'default': e.default_value, 'target': e.target_value}
                for e in self.translated
            ],
            'extra': [{'key': e.key, 'value': e.target_value} for e in self.extra],
        }


class LocaleDiff:
    """
    Locale diff hesaplayıcısı.

    Varsayılan dil ile hedef dil arasındaki farkları bulur:
    - Eksik key'ler
    - Çevrilmiş key'ler
    - Çevrilmemiş (aynı değer) key'ler
    - Fazla key'ler
    """

    def compare(
        self,
        default: Mapping[str, str],
        target: Mapping[str, str],
        default_locale: str = "en",
        target_locale: str = "tr",
        prefix: str = ""
    ) -> DiffResult:
        """
        İki dil arasındaki farkları hesapla.

        Args:
            default: Flat strings of the default locale
            target: Flat strings of the target locale
            default_locale: Default locale code
            target_locale: Target locale code
            prefix: Prepended to every reported key (e.g. "lang.php:")

        Returns:
            DiffResult
        """
        result = DiffResult(default_locale=default_locale, target_locale=target_locale)
        self.compare_into(result, default, target, prefix)
        self.sort(result)
        return result

    def compare_into(
        self,
        result: DiffResult,
        default: Mapping[str, str],
        target: Mapping[str, str],
        prefix: str = ""
    ):
        """Append the differences of one file to an existing result."""
        for key, default_value in default.items():
            status = key_status(default_value, target, key)
            entry = DiffEntry(
                key=f"{prefix}{key}",
                status=status.value,
                default_value=default_value,
                target_value=target.get(key),
            )
            if status is KeyStatus.MISSING:
                result.missing.append(entry)
            elif status is KeyStatus.TRANSLATED:
                result.translated.append(entry)
            else:
                result.untranslated.append(entry)

        for key, target_value in target.items():
            if key not in default:
                result.extra.append(DiffEntry(
                    key=f"{prefix}{key}",
                    status="extra",
                    target_value=target_value,
                ))

    @staticmethod
    def sort(result: DiffResult):
        """Sırala."""
        for entries in (result.missing, result.translated, result.untranslated, result.extra):
            entries.sort(key=lambda x: x.key)

    def print_diff(
        self,
        result: DiffResult,
        show_values: bool = True,
        limit: int = 50
    ):
        """
        Diff sonucunu yazdır.

        Args:
            result: DiffResult
            show_values: Değerleri de göster
            limit: Maksimum gösterilecek entry sayısı
        """
        print(f"\n{Colors.bold('📊 LOCALE DIFF')}")
        print("=" * 70)
        print(f"Comparing: {result.default_locale} → {result.target_locale}")
        print()

        print(f"{Colors.bold('📈 SUMMARY')}")
        print("-" * 40)
        print(f"  {Colors.error('−')} Missing in {result.target_locale}: {len(result.missing)}")
        print(f"  {Colors.warning('=')} Untranslated (same value): {len(result.untranslated)}")
        print(f"  {Colors.success('✓')} Translated: {len(result.translated)}")
        print(f"  {Colors.info('+')} Extra in {result.target_locale}: {len(result.extra)}")
        print(f"  Coverage: {result.percentage:.1f}%")
        print()

        sections = [
            (f'❌ MISSING IN {result.target_locale.upper()}', result.missing, Colors.error('−'), 'default_value'),
            ('⚠️  UNTRANSLATED', result.untranslated, Colors.warning('='), 'default_value'),
            (f'➕ EXTRA IN {result.target_locale.upper()}', result.extra, Colors.info('+'), 'target_value'),
        ]

        for title, entries, marker, attribute in sections:
            if not entries:
                continue
            print(f"{Colors.bold(title)} ({len(entries)})")
            print("-" * 40)

            for entry in entries[:limit]:
                print(f"  {marker} {entry.key}")
                value = getattr(entry, attribute)
                if show_values and value:
                    print(f"      \"{self._truncate(value)}\"")

            if len(entries) > limit:
                print(f"  ... and {len(entries) - limit} more")
            print()

        print("=" * 70)
        if result.is_complete:
            print(f"{Colors.success('✅ Everything is translated!')}")
        else:
            print(f"Outstanding keys: {len(result.missing) + len(result.untranslated)}")

    def _truncate(self, text: Optional[str], max_len: int = 50) -> str:
        """Metni kısalt."""
        if not text:
            return ""
        if len(text) <= max_len:
            return text
        return text[:max_len - 3] + "..."

    def export_diff(self, result: DiffResult, output_path: Path, format: str = "md"):
        """
        Diff sonucunu dosyaya export et.

        Args:
            result: DiffResult
            output_path: Çıktı dosya yolu
            format: Çıktı formatı (md, json, txt)
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if format == "json":
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)

        elif format == "md":
            lines = [
                f"# Locale Diff: {result.default_locale} → {result.target_locale}",
                "",
                "## Summary",
                "",
                "| Type | Count |",
                "|------|-------|",
                f"| Missing in {result.target_locale} | {len(result.missing)} |",
                f"| Untranslated | {len(result.untranslated)} |",
                f"| Translated | {len(result.translated)} |",
                f"| Extra in {result.target_locale} | {len(result.extra)} |",
                f"| Coverage | {result.percentage:.1f}% |",
                "",
            ]

            if result.missing:
                lines.extend([f"## Missing in {result.target_locale}", ""])
                for entry in result.missing:
                    lines.append(f"- `{entry.key}`: \"{entry.default_value}\"")
                lines.append("")

            if result.untranslated:
                lines.extend(["## Untranslated", ""])
                for entry in result.untranslated:
                    lines.append(f"- `{entry.key}`: \"{entry.default_value}\"")
                lines.append("")

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write('\n'.join(lines))

        else:  # txt
            lines = [
                f"Locale Diff: {result.default_locale} → {result.target_locale}",
                "=" * 50,
                "",
                f"Missing in {result.target_locale}: {len(result.missing)}",
                f"Untranslated: {len(result.untranslated)}",
                f"Translated: {len(result.translated)}",
                f"Extra in {result.target_locale}: {len(result.extra)}",
                "",
            ]

            if result.missing:
                lines.append(f"--- Missing in {result.target_locale} ---")
                for entry in result.missing:
                    lines.append(f"  {entry.key}")
                lines.append("")

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write('\n'.join(lines))

        print(f"{Colors.success('✓')} Diff exported to: {output_path}")
