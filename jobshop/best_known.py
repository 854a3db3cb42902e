"""Best known makespans of classic benchmark instances (used for gap reporting)."""

from __future__ import annotations

BEST_KNOWN: dict[str, int] = {
    "aaa1": 11,
    "ft06": 55,
    "ft10": 930,
    "ft20": 1165,
    "la01": 666,
    "la02": 655,
    "la03": 597,
    "la04": 590,
    "la05": 593,
    "la06": 926,
    "la07": 890,
    "la08": 863,
    "la09": 951,
    "la10": 958,
    "la11": 1222,
    "la12": 1039,
    "la13": 1150,
    "la14": 1292,
    "la15": 1207,
    "la16": 945,
    "la17": 784,
    "la18": 848,
    "la19": 842,
    "la20": 902,
    "abz5": 1234,
    "abz6": 943,
}


def is_known(name: str) -> bool:
    return name in BEST_KNOWN


def of(name: str) -> int:
    """Best known makespan of ``name``.

    Raises:
        KeyError: If the instance is not in the table.
    """
    try:
        return BEST_KNOWN[name]
    except KeyError:
        raise KeyError(f"No best known result for instance {name!r}") from None


def gap_percent(makespan: int, name: str) -> float | None:
    """Relative distance to the best known makespan, or None for unknown instances."""
    if not is_known(name):
        return None
    best = BEST_KNOWN[name]
    return 100.0 * (makespan - best) / best
