"""Validation utilities."""

import re
from typing import Optional

LOCALE_CODE_PATTERN = re.compile(r'^[A-Za-z]{2,3}([-_][A-Za-z0-9]{2,8})*$')
NAMESPACE_PATTERN = re.compile(r'^[A-Za-z0-9_.\-]+$')
KEY_SEGMENT_PATTERN = re.compile(r'^[^\x00-\x1f\x7f]+$')


def is_valid_locale_code(code: str) -> bool:
    """
    Validate a locale identifier used as a directory name.

    Examples: en, tr, pt-br, pt_BR, zh-Hans, sr-Latn-RS
    """
    if not code or not isinstance(code, str):
        return False
    return bool(LOCALE_CODE_PATTERN.match(code))


def is_valid_namespace(namespace: str) -> bool:
    """
    Validate a key reference namespace.

    Valid formats:
        - acme.blog
        - rainlab.user
        - app
    """
    if not namespace or not isinstance(namespace, str):
        return False
    if '::' in namespace:
        return False
    return bool(NAMESPACE_PATTERN.match(namespace))


def is_valid_key_path(key: str) -> bool:
    """
    Validate a dotted key path inside a locale file.

    Keys only end up in file content, so any text is allowed per segment
    except blanks and control characters.

    Valid formats:
        - title
        - menu.save
        - errors.network.timeout
        - Save changes
        - and/or
    """
    if not key or not isinstance(key, str):
        return False

    for part in key.split('.'):
        if not part.strip() or not KEY_SEGMENT_PATTERN.fullmatch(part):
            return False

    return True


def is_safe_file_name(name: str, extension: Optional[str] = None) -> bool:
    """
    Check that a locale file name is a plain file name.

    Rejects separators and relative segments so the name cannot escape the
    locale directory.

    Args:
        name: File name, e.g. "lang.php"
        extension: Required extension including the dot
    """
    if not name or not isinstance(name, str):
        return False
    if '/' in name or '\\' in name or '\x00' in name:
        return False
    if name in ('.', '..') or name.startswith('.'):
        return False
    if extension and (not name.endswith(extension) or len(name) == len(extension)):
        return False
    return True
