"""JSON report generator."""

import json
from pathlib import Path
from datetime import datetime
from typing import Optional

from ..__version__ import __version__
from ..core.localizer import Localizer
from ..utils.colors import Colors


class JSONReporter:
    """Write the strings of a locale as a JSON report."""

    @staticmethod
    def generate(
        localizer: Localizer,
        locale: str,
        output_path: Optional[Path] = None,
        status: Optional[str] = None,
        pretty: bool = True
    ) -> Path:
        """
        Generate JSON report.

        Args:
            localizer: Initialized localizer
            locale: Target locale
            output_path: Output file path
            status: Only include keys with this status
            pretty: Pretty print JSON

        Returns:
            Path to generated report
        """
        if output_path is None:
            output_path = Path.cwd() / f'strings_{locale}.json'

        stats = localizer.stats(locale)[locale]
        files = {}
        for file, strings in localizer.fetch_strings(locale).items():
            data = strings.to_dict(localizer.default_locale, locale)
            if status:
                keys = {key for key, value in strings.status.items() if value == status}
                data = {
                    section: {key: value for key, value in entries.items() if key in keys}
                    for section, entries in data.items()
                }
            files[file] = data

        report = {
            'metadata': {
                'generated_at': datetime.now().isoformat(),
                'version': __version__,
                'default_locale': localizer.default_locale,
                'locale': locale,
            },
            'stats': stats.to_dict(),
            'files': files,
        }

        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            if pretty:
                json.dump(report, f, indent=2, ensure_ascii=False)
            else:
                json.dump(report, f, ensure_ascii=False)

        print(f"\n{Colors.success('✓')} JSON report: {output_path}")

        return output_path

    @staticmethod
    def load(report_path: Path) -> dict:
        """
        Load JSON report from file.

        Args:
            report_path: Path to JSON report

        Returns:
            Report dictionary
        """
        with open(report_path, 'r', encoding='utf-8') as f:
            return json.load(f)
