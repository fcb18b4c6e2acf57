"""
HCL string quoting.

Produces text that can be placed between double quotes in an HCL
configuration file and read back as the original string.  Mirrors the
quoting done by ``hclwrite`` in the upstream HCL library.
"""

from __future__ import annotations

import unicodedata

# Unicode general category groups treated as printable: letters, marks,
# numbers, punctuation and symbols.
_PRINTABLE_GROUPS = frozenset("LMNPS")

_SIMPLE_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    '"': '\\"',
    "\\": "\\\\",
}

_TEMPLATE_INTRODUCERS = ("$", "%")


def is_printable(c: str) -> bool:
    """Return True if *c* can be written literally inside a quoted string.

    The ASCII space plus every character whose general category is in the
    L, M, N, P or S groups.  Other whitespace and control, format,
    surrogate and unassigned characters are not printable.
    """
    if c == " ":
        return True
    return unicodedata.category(c)[0] in _PRINTABLE_GROUPS


def escape_quoted_string(s: str) -> str:
    """Escape *s* for use inside a double-quoted HCL string.

    ``${`` and ``%{`` would start a template sequence, so the introducer
    is doubled when the next character is ``{``.  Non-printable
    characters become ``\\uXXXX`` or ``\\UXXXXXXXX`` escapes.

    Parameters
    ----------
    s:
        Arbitrary text, e.g. a filesystem path.

    Returns
    -------
    str
        The escaped text, without the surrounding quotes.
    """
    parts: list[str] = []
    last = len(s) - 1
    for i, c in enumerate(s):
        if c in _SIMPLE_ESCAPES:
            parts.append(_SIMPLE_ESCAPES[c])
        elif c in _TEMPLATE_INTRODUCERS:
            parts.append(c)
            if i < last and s[i + 1] == "{":
                parts.append(c)
        elif is_printable(c):
            parts.append(c)
        elif ord(c) < 0x10000:
            parts.append(f"\\u{ord(c):04x}")
        else:
            parts.append(f"\\U{ord(c):08x}")
    return "".join(parts)
