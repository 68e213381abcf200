import re

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_leading_int(text: str | None) -> int | None:
    """Parse the integer at the start of `text`, ignoring anything after it.

    Vendor exports (and the instrument software that reads our output) are lenient
    about trailing junk, e.g. "12 " or "3a" both mean 3 and 12.  Returns None when
    `text` does not start with an integer.

    >>> parse_leading_int(" 12abc")
    12
    >>> parse_leading_int("Well") is None
    True
    """
    if not text:
        return None
    match = _LEADING_INT_RE.match(text)
    if match is None:
        return None
    return int(match.group(1))
