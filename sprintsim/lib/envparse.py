"""
Parser for balance.env files.

Reads KEY=value lines into a dict of strings. Typed conversion and range
checks happen in config.py / validate.py.
"""

import re
from pathlib import Path

KEY_PATTERN = re.compile(r'^[A-Z][A-Z0-9_]*$')


def _strip_inline_comment(value: str) -> str:
    """Drop a trailing ' # comment'. A quoted value ends at its closing quote."""
    quote = value[:1]
    if quote in ('"', "'"):
        end = value.find(quote, 1)
        return value[:end + 1] if end != -1 else value
    hash_pos = value.find(' #')
    return value[:hash_pos].rstrip() if hash_pos != -1 else value


def parse_env(text: str) -> dict:
    """
    Parse env text, return dict.

    Raises:
        ValueError: if a line has no '=', an invalid key, or a duplicate key
    """
    result = {}

    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()

        # Skip empty and comments
        if not line or line.startswith('#'):
            continue

        if '=' not in line:
            raise ValueError(f"Line {lineno}: Invalid syntax (no '=')")

        key, _, value = line.partition('=')
        key = key.strip()
        value = _strip_inline_comment(value.strip())

        if not KEY_PATTERN.match(key):
            raise ValueError(f"Line {lineno}: Invalid key '{key}'")
        if key in result:
            raise ValueError(f"Line {lineno}: Duplicate key '{key}'")

        # Strip quotes if present
        if len(value) >= 2:
            if (value.startswith('"') and value.endswith('"')) or \
               (value.startswith("'") and value.endswith("'")):
                value = value[1:-1]

        result[key] = value

    return result


def load_env(filepath: str) -> dict:
    """
    Parse env file, return dict.

    Raises:
        FileNotFoundError: if file doesn't exist
        ValueError: if syntax invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Env file not found: {filepath}")
    return parse_env(path.read_text())
