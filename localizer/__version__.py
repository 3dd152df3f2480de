"""Version information for localizer."""

__version__ = "1.2.0"
__author__ = "Sezgin Paksoy"
__description__ = "Translation coverage, key references and editing for PHP locale files"

# Changelog:
# 1.2.0 - HTTP API and format backends
#       - New 'serve' command: localizer serve --port 3005
#       - GET /locales, /stats, /stats/<locale>, /strings/<locale>
#       - POST /save/<locale>/<file>/<key> writes a single translation
#       - No-cache headers on every response
#       - YAML and JSON locale files (--format yaml|json)
#       - php-cli backend with parse timeout (format.parse_timeout)
#
# 1.1.0 - Safe writes
#       - Per-file locks, concurrent saves of one file no longer lose updates
#       - Failed writes roll back the in-memory strings
#       - Locale, file and key names validated before touching the disk
#       - Blank translations remove the key instead of writing ""
#
# 1.0.0 - Initial release
#       - Pure Python reader for <?php return [...]; locale files
#       - Source scanning for <namespace>::<key> references with excerpts
#       - stats, strings, diff, refs and set commands
#       - Brand / short literal detection for identical values
