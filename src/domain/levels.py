from __future__ import annotations

from collections.abc import Iterable

from src.domain.records import SupportLevel


def expand_level(selected: SupportLevel | None, all_levels: Iterable[SupportLevel]) -> list[SupportLevel]:
    """Return the selected level followed by every numerically higher level.

    Granting a tier also grants each tier with a greater ``level`` value, so
    one selection fans out to several rows. Ties keep catalog order.
    """
    if selected is None or selected.level is None:
        return []
    higher = sorted(
        (level for level in all_levels if level.level is not None and level.level > selected.level),
        key=lambda level: level.level,
    )
    expanded = [selected]
    seen = {selected.id}
    for level in higher:
        if level.id in seen:
            continue
        seen.add(level.id)
        expanded.append(level)
    return expanded
