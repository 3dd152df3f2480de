"""Command-line interface for the localizer."""

import sys
import json
import argparse
from pathlib import Path
from typing import Optional

from .__version__ import __version__
from .core.errors import LocalizerError
from .core.localizer import Localizer
from .features.diff import KeyStatus, LocaleDiff
from .formats import FORMATS
from .reports.console_reporter import ConsoleReporter
from .reports.json_reporter import JSONReporter
from .utils.colors import Colors
from .utils.config import CONFIG_FILE_NAME, Config, ConfigValidationError, create_default_config
from .utils.logging import configure_logging
from .utils.server import serve


def load_and_validate_config(
    config_path: Optional[str] = None,
    validate: bool = True,
    verbose: bool = False
) -> Config:
    """
    Load configuration and optionally validate it.

    Args:
        config_path: Config file; defaults to .localizer.yml in the current directory
        validate: Whether to validate the config
        verbose: Whether to print warnings

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If validation fails with errors
    """
    if config_path and not Path(config_path).exists():
        print(f"{Colors.error('❌')} Config not found: {config_path}")
        raise ConfigValidationError([f"Config not found: {config_path}"])

    try:
        config = Config.from_file(Path(config_path) if config_path else None)
    except ConfigValidationError as e:
        print(f"{Colors.error('❌')} {e}")
        raise

    if validate:
        errors, warnings = config.validate()

        if verbose and warnings:
            for warning in warnings:
                print(f"{Colors.warning('⚠️')}  Config warning: {warning}")

        if errors:
            print(f"{Colors.error('❌')} Configuration errors:")
            for error in errors:
                print(f"   • {error}")
            raise ConfigValidationError(errors)

    return config


def build_localizer(args) -> Optional[Localizer]:
    """Load the config and return an initialized localizer, or None on failure."""
    try:
        config = load_and_validate_config(args.config, verbose=args.verbose)
    except ConfigValidationError:
        return None

    try:
        return Localizer(config.to_options()).initialize()
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return None


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path(args.config) if args.config else Path.cwd() / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('❌')} Config already exists: {config_path}")
        print("   Use --force to overwrite")
        return 1

    config = create_default_config(args.format)
    config.save(config_path)

    print(f"{Colors.success('✅')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Set locales.namespace in {config_path.name} (e.g. acme.blog)")
    print("2. Run: localizer stats")
    return 0


def cmd_locales(args):
    """List known locales."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    print(f"\n{Colors.bold('🌍 LOCALES')}")
    print("-" * 40)
    print(f"  {localizer.default_locale} {Colors.dim('(default)')}")
    for locale in localizer.list_locales():
        print(f"  {locale}")
    print()
    return 0


def cmd_stats(args):
    """Show translation coverage."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    try:
        stats = localizer.stats(args.locale.lower() if args.locale else None)
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return 1

    calculator = localizer.stats_calculator

    if args.json:
        calculator.export_json(stats, Path(args.json))
    elif args.markdown:
        calculator.export_markdown(stats, Path(args.markdown))
    elif not args.ci:
        calculator.print_summary(stats)

    # JSON output for CI/CD
    if args.ci:
        print(json.dumps(
            {locale: locale_stats.to_dict() for locale, locale_stats in stats.items()},
            indent=2,
            ensure_ascii=False
        ))
        below = [locale for locale, locale_stats in stats.items() if locale_stats.percentage < args.threshold]
        return 1 if below else 0

    return 0


def cmd_strings(args):
    """Show the strings of a locale."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    locale = args.locale.lower()
    try:
        if args.json:
            JSONReporter.generate(localizer, locale, Path(args.json), status=args.status)
        else:
            ConsoleReporter.print_strings(
                localizer.fetch_strings(locale),
                locale,
                status=args.status,
                show_references=args.references
            )
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return 1

    return 0


def cmd_diff(args):
    """Compare a locale with the default locale."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    try:
        result = localizer.compare(args.target.lower())
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return 1

    differ = LocaleDiff()
    if args.output:
        output_path = Path(args.output)
        format = args.format or output_path.suffix.lstrip('.') or 'md'
        differ.export_diff(result, output_path, format=format)
    else:
        differ.print_diff(result, show_values=not args.no_values, limit=args.limit)

    if args.fail_on_missing and result.missing:
        return 1

    return 0


def cmd_refs(args):
    """Show the source references of a key."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    ConsoleReporter.print_references(args.key, localizer.references(args.key))
    return 0


def cmd_set(args):
    """Set one translation."""
    localizer = build_localizer(args)
    if localizer is None:
        return 1

    locale = args.locale.lower()
    try:
        written = localizer.update_string(locale, args.file, args.key, args.value)
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return 1

    if not written:
        print(f"{Colors.error('❌')} Could not write {locale}/{args.file}, change rolled back")
        return 1

    action = 'Removed' if not args.value.strip() else 'Saved'
    print(f"{Colors.success('✓')} {action} {locale}/{args.file} [{args.key}]")
    return 0


def cmd_serve(args):
    """Run the HTTP API."""
    try:
        config = load_and_validate_config(args.config, verbose=args.verbose)
    except ConfigValidationError:
        return 1

    host = args.host or config.server.host
    port = args.port if args.port is not None else config.server.port

    try:
        serve(config.to_options(), host=host, port=port)
    except LocalizerError as e:
        print(f"{Colors.error('❌')} {e.message}")
        return 1
    except OSError as e:
        print(f"{Colors.error('❌')} Cannot listen on {host}:{port}: {e}")
        return 1

    return 0


COMMANDS = {
    'init': cmd_init,
    'locales': cmd_locales,
    'stats': cmd_stats,
    'strings': cmd_strings,
    'diff': cmd_diff,
    'refs': cmd_refs,
    'set': cmd_set,
    'serve': cmd_serve,
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='localizer',
        description='Translation coverage and editing for PHP locale files'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', '-c', metavar='PATH', help=f'Config file (default: ./{CONFIG_FILE_NAME})')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug output')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only show warnings and errors')
    parser.add_argument('--log-file', metavar='PATH', help='Write a detailed log to this file')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--format', choices=sorted(FORMATS), default='php',
                             help='Locale file format (default: php)')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # locales
    subparsers.add_parser('locales', help='List known locales')

    # stats
    stats_parser = subparsers.add_parser('stats', help='Show translation coverage')
    stats_parser.add_argument('--locale', '-l', metavar='CODE', help='Only this locale')
    stats_parser.add_argument('--json', metavar='PATH', help='Export stats as JSON')
    stats_parser.add_argument('--markdown', metavar='PATH', help='Export stats as Markdown')
    stats_parser.add_argument('--ci', action='store_true', help='CI/CD mode (JSON output, exit code based on threshold)')
    stats_parser.add_argument('--threshold', type=float, default=80.0, help='Coverage threshold for CI (default: 80)')

    # strings
    strings_parser = subparsers.add_parser('strings', help='Show the strings of a locale')
    strings_parser.add_argument('locale', help='Locale code')
    strings_parser.add_argument('--status', '-s', choices=[status.value for status in KeyStatus],
                                help='Only keys with this status')
    strings_parser.add_argument('--references', '-r', action='store_true', help='Show source locations')
    strings_parser.add_argument('--json', metavar='PATH', help='Export strings as JSON')

    # diff
    diff_parser = subparsers.add_parser('diff', help='Compare a locale with the default locale')
    diff_parser.add_argument('--target', '-t', required=True, help='Target locale to compare')
    diff_parser.add_argument('--output', '-o', metavar='PATH', help='Export diff to file')
    diff_parser.add_argument('--format', '-f', choices=['md', 'json', 'txt'], help='Output format')
    diff_parser.add_argument('--no-values', action='store_true', help='Hide values')
    diff_parser.add_argument('--limit', type=int, default=50, help='Max entries to show (default: 50)')
    diff_parser.add_argument('--fail-on-missing', action='store_true', help='Exit with error if missing keys found')

    # refs
    refs_parser = subparsers.add_parser('refs', help='Show where a key is used')
    refs_parser.add_argument('key', help='Full dotted key, e.g. lang.menu.save')

    # set
    set_parser = subparsers.add_parser('set', help='Set one translation')
    set_parser.add_argument('locale', help='Locale code')
    set_parser.add_argument('file', help='Locale file, e.g. lang.php')
    set_parser.add_argument('key', help='Dotted key inside the file')
    set_parser.add_argument('value', help='Translation (empty removes the key)')

    # serve
    serve_parser = subparsers.add_parser('serve', help='Run the HTTP API')
    serve_parser.add_argument('--host', metavar='HOST', help='Address to listen on')
    serve_parser.add_argument('--port', type=int, metavar='PORT', help='Port to listen on')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=args.verbose,
        quiet=args.quiet,
        log_file=Path(args.log_file) if args.log_file else None
    )

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 0

    return command(args)


if __name__ == '__main__':
    sys.exit(main())
