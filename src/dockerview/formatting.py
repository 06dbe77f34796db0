"""Human-readable formatting for byte counters and percentages."""

_UNIT = 1024
_PREFIXES = "KMGTPE"


def format_bytes(count: int) -> str:
    """Format a byte count with binary (1024-based) units.

    Parameters
    ----------
    count : int
        Non-negative number of bytes.

    Returns
    -------
    str
        ``"<n> B"`` below 1024, otherwise the largest unit whose quotient
        stays below 1024 (capped at exabytes) with one decimal.

    Raises
    ------
    ValueError
        If ``count`` is negative.

    Examples
    --------
    >>> format_bytes(500)
    '500 B'
    >>> format_bytes(1024)
    '1.0 KB'
    >>> format_bytes(1536 * 1024)
    '1.5 MB'
    """
    if count < 0:
        raise ValueError(f"Byte count must be non-negative, got {count}")
    if count < _UNIT:
        return f"{count} B"

    div, exp = _UNIT, 0
    n = count // _UNIT
    while n >= _UNIT and exp < len(_PREFIXES) - 1:
        div *= _UNIT
        exp += 1
        n //= _UNIT

    return f"{count / div:.1f} {_PREFIXES[exp]}B"


def format_percent(value: float) -> str:
    """Format a percentage with one decimal, e.g. ``'12.5%'``."""
    return f"{value:.1f}%"
