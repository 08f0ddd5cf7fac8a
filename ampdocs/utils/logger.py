"""Terminal-safe output with ASCII fallbacks for non-UTF-8 consoles.

Doc-block text from the export can carry arrows, ellipses and box-drawing
characters; this module swaps them for ASCII before printing on terminals
that cannot encode them.
"""
import sys
import locale
from typing import Callable


# Unicode to ASCII replacements used by the CLI and common in doc-blocks
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '←': '<-',
    '⇒': '=>',
    '↳': '+-',
    '│': '|',
    '─': '-',
    '├': '+',
    '└': '+',
    '…': '...',
    '•': '*',
    '“': '"',
    '”': '"',
    '‘': "'",
    '’': "'",
    '–': '-',
    '—': '-',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (LookupError, ValueError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can print UTF-8 text."""
    return detect_terminal_encoding().replace('_', '-') in ('utf-8', 'utf8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode glyphs with ASCII equivalents if the terminal needs it.

    Args:
        text: Text potentially containing Unicode glyphs

    Returns:
        str: Text safe for the current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    # Anything else the terminal cannot encode becomes '?'
    encoding = detect_terminal_encoding()
    try:
        return sanitized.encode(encoding, errors='replace').decode(encoding)
    except LookupError:
        return sanitized.encode('ascii', errors='replace').decode('ascii')


def create_safe_print() -> Callable:
    """Create a print function that sanitizes string arguments."""
    def safe_print(*args, **kwargs):
        sanitized_args = [
            sanitize_for_terminal(arg) if isinstance(arg, str) else arg
            for arg in args
        ]
        print(*sanitized_args, **kwargs)

    return safe_print


safe_print = create_safe_print()
