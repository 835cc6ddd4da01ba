"""
Partial-key grouping and series palette.

A series name is a whitespace separated token sequence. Its first token is
the partial key; series sharing a key share one legend entry and one color
("bid depth-1" and "bid depth-2" are both "bid"). The remainder is the
suffix, which picks the dash pattern (see line_styles.py).
"""

from typing import Dict, Iterable, Optional, Sequence, Set, Tuple

from .config import FALLBACK_COLOR, SERIES_PALETTE


def split_series_name(name: str) -> Tuple[str, str]:
    """
    Split a series name into (partial key, suffix).

    >>> split_series_name("bid depth-1")
    ('bid', 'depth-1')
    >>> split_series_name("last")
    ('last', '')
    """
    parts = name.split(maxsplit=1)
    if not parts:
        return "", ""
    key = parts[0]
    suffix = parts[1].strip() if len(parts) > 1 else ""
    return key, suffix


def partial_key(name: str) -> str:
    return split_series_name(name)[0]


def series_suffix(name: str) -> str:
    return split_series_name(name)[1]


def collect_partial_keys(names: Iterable[str]) -> Set[str]:
    """Distinct partial keys over a collection of series names."""
    return {partial_key(name) for name in names}


def build_colors(keys: Iterable[str],
                 palette: Optional[Sequence[str]] = None) -> Dict[str, str]:
    """
    Assign a palette color to each partial key.

    Keys are sorted lexicographically and assigned palette entries by index
    modulo the palette size, so the same key set always gets the same colors
    whatever order it arrives in.

    Args:
        keys: Partial keys to color
        palette: Ordered colors (defaults to SERIES_PALETTE)

    Returns:
        Mapping key -> hex color
    """
    palette = list(palette) if palette else SERIES_PALETTE
    return {
        key: palette[idx % len(palette)]
        for idx, key in enumerate(sorted(set(keys)))
    }


def color_for(colors: Dict[str, str], key: str) -> str:
    """Color for a key, or the neutral fallback if it was never assigned."""
    return colors.get(key, FALLBACK_COLOR)


def color_for_series(colors: Dict[str, str], series_name: str) -> str:
    return color_for(colors, partial_key(series_name))
