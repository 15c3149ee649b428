"""Parsing of space-separated sample series returned by the stats endpoints."""

from typing import Any, List, Optional, Sequence


def format_series(raw: Any) -> str:
    """
    Render a stats payload value as a space-separated series.

    The REST API normally returns a JSON array of numbers per statistic;
    arrays are joined with single spaces, a missing value becomes "".
    """
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, (list, tuple)):
        return " ".join(str(item) for item in raw)
    return str(raw)


def extract_series(text: str) -> List[float]:
    """
    Parse a series string into floats, oldest first.

    Splits on single spaces and silently drops tokens that are not numbers,
    including the empty tokens produced by repeated or trailing spaces.
    Tokens carrying other whitespace, digit separators or non-ASCII digits
    are not numbers here even though float() would accept them.

    Args:
        text: Series string, e.g. "1.0 bad 2.5 "

    Returns:
        List[float]: Parsed values in original order, e.g. [1.0, 2.5]
    """
    values = []
    for token in text.split(" "):
        if not _is_plain_number(token):
            continue
        try:
            values.append(float(token))
        except ValueError:
            continue
    return values


def _is_plain_number(token: str) -> bool:
    return token.isascii() and token == token.strip() and "_" not in token


def latest_sample(series: Sequence[float]) -> Optional[float]:
    """Most recent value of a parsed series, or None when it is empty."""
    if not series:
        return None
    return series[-1]
