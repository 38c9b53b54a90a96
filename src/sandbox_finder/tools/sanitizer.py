"""
Query sanitization for the Sandbox Finder.

Raw query text is reduced to an explicit pass-list of characters before it is
used for anything else. Characters outside the pass-list are dropped, never
escaped, so path separators and shell metacharacters cannot reach the walker.
"""

import re


# ASCII letters and digits, accented Latin letters (Latin-1 Supplement and
# Latin Extended-A/B, without the multiplication and division signs),
# whitespace, the symbols _ - . ( ) [ ] { } + = and the CJK Unified
# Ideographs block. Everything else is removed.
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u024f\s_\-.()\[\]{}+=\u4e00-\u9fff]")


def sanitize(raw: str) -> str:
    """
    Filter query text down to the allowed character set.

    Case is preserved; matching lower-cases separately.

    Args:
        raw: Query text as received from the caller

    Returns:
        The filtered text, possibly empty
    """
    if not raw:
        return ""
    return _DISALLOWED_CHARS.sub("", raw)
