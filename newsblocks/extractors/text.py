"""Text normalization for extracted article text.

Upstream CMS output is noisy: double-encoded entities, stray ``<script>``
fragments inside text nodes, C0 control characters from bad re-encoding,
blank line runs and spacer glyphs (U+2800 braille blank, no-break space).
:func:`normalize` cleans all of that; :func:`has_actual_text` decides whether
what is left is worth a content block.
"""

from __future__ import annotations

import html
import re
import unicodedata

# Blank or whitespace-only line runs (keeps single intra-paragraph breaks)
_BLANK_LINES_RE = re.compile(r"(^[\r\n]*|[\r\n]+)[\s\t]*[\r\n]+", re.MULTILINE)
_SCRIPT_RE = re.compile(r"<script\b.*?</script\s*>", re.IGNORECASE | re.DOTALL)
# C0 controls except \n and \r, plus DEL
_CONTROL_RE = re.compile(r"[\x00-\x09\x0b\x0c\x0e-\x1f\x7f]")
_BRAILLE_BLANK = "\u2800"

# Unicode Z* (separator) characters
SEPARATORS = (
    "\u0020\u00a0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)
_ZERO_WIDTH = "\u200b\u200c\u200d\u2060\ufeff"
_ASCII_BLANKS = " \t\n\r\0\x0b"

# Characters that do not count as content on their own
INVISIBLE = _BRAILLE_BLANK + SEPARATORS + _ZERO_WIDTH + _ASCII_BLANKS + "\x0c"

_TRIM = SEPARATORS + _ASCII_BLANKS + "\x0c"


def _decode_entities(text: str) -> str:
    # html.unescape never lengthens its input, so this terminates
    while True:
        decoded = html.unescape(text)
        if decoded == text:
            return text
        text = decoded


def _normalize_once(text: str) -> str:
    text = _decode_entities(text)
    text = _SCRIPT_RE.sub("", text)
    text = _CONTROL_RE.sub("", text)
    text = text.replace(_BRAILLE_BLANK, "")
    text = _BLANK_LINES_RE.sub("", text)
    return text.strip(_TRIM)


def normalize(raw: str | None) -> str:
    """Return *raw* cleaned of entities, control characters and line noise.

    Every step only removes or shortens, so the pipeline is repeated until
    the text stops changing; the result is a fixed point and
    ``normalize(normalize(s)) == normalize(s)`` holds for any input.
    """
    if not raw:
        return ""
    text = raw
    while True:
        cleaned = _normalize_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def has_text(raw: str | None) -> bool:
    """Return True if *raw* is not blank after an ASCII whitespace trim.

    This is the cheap "node has non-blank text" gate; spacer-only strings
    pass it and are rejected later by :func:`has_actual_text`.
    """
    return bool(raw) and raw.strip(_ASCII_BLANKS) != ""


def has_actual_text(text: str | None, strip_punctuation: bool = False) -> bool:
    """Return True unless *text* is made only of invisible spacer characters.

    With *strip_punctuation*, a remainder consisting solely of punctuation
    (a lone dash or ellipsis left over from a removed widget) is also
    treated as empty.
    """
    if not text:
        return False
    remainder = text.strip(INVISIBLE)
    if not remainder:
        return False
    if strip_punctuation:
        visible = [ch for ch in remainder if ch not in INVISIBLE]
        return not all(unicodedata.category(ch).startswith("P") for ch in visible)
    return True
