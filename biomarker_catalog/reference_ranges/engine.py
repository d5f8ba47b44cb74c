import math
from typing import List, Mapping, Optional, Sequence, Tuple

from biomarker_catalog.schemas.ranges import EIGHT_FORMAT, FOURTEEN_FORMAT, Zone


# Zones between consecutive boundaries, paired with their depth (0 = outermost).
# Eight-format: min_bio, min_at_risk, min_medical, min_optimal,
#               max_optimal, max_medical, max_at_risk, max_bio
EIGHT_FORMAT_ZONES: Tuple[Tuple[Zone, int], ...] = (
    (Zone.CRITICAL_LOW, 0),
    (Zone.AT_RISK_LOW, 1),
    (Zone.NORMAL, 2),
    (Zone.OPTIMAL, 3),
    (Zone.NORMAL, 2),
    (Zone.AT_RISK_HIGH, 1),
    (Zone.CRITICAL_HIGH, 0),
)

# Fourteen-format: two seven-boundary profiles side by side, the first without
# max_bio and the second without min_bio; the gap between them is critical.
FOURTEEN_FORMAT_ZONES: Tuple[Tuple[Zone, int], ...] = (
    (Zone.CRITICAL_LOW, 0),
    (Zone.AT_RISK_LOW, 1),
    (Zone.NORMAL, 2),
    (Zone.OPTIMAL, 3),
    (Zone.NORMAL, 2),
    (Zone.AT_RISK_HIGH, 1),
    (Zone.CRITICAL_BETWEEN, 0),
    (Zone.AT_RISK_LOW, 1),
    (Zone.NORMAL, 2),
    (Zone.OPTIMAL_HIGH, 3),
    (Zone.NORMAL, 2),
    (Zone.AT_RISK_HIGH, 1),
    (Zone.CRITICAL_HIGH, 0),
)

ZONE_LAYOUTS = {
    EIGHT_FORMAT: EIGHT_FORMAT_ZONES,
    FOURTEEN_FORMAT: FOURTEEN_FORMAT_ZONES,
}


def select_age_key(range_list: Mapping[str, Sequence[float]], age: float) -> Optional[str]:
    """Pick the age bracket for `age`.

    Keys are upper-inclusive buckets: the smallest key >= age wins, and ages
    above every key fall into the largest one ("100" means 100 and older).
    """
    if not range_list:
        return None
    keys: List[Tuple[int, str]] = sorted((int(key), key) for key in range_list)
    for bound, key in keys:
        if bound >= age:
            return key
    return keys[-1][1]


def classify_zone(boundaries: Sequence[float], value: float) -> Zone:
    """Classify `value` against an 8- or 14-element boundary array.

    Every zone is a closed interval; a value on a shared boundary belongs to
    the deeper (inner) zone, e.g. a value equal to min_medical is normal.
    """
    layout = ZONE_LAYOUTS.get(len(boundaries))
    if layout is None or value is None or not math.isfinite(value):
        return Zone.NOT_CLASSIFIED

    if value < boundaries[0]:
        return Zone.BELOW_BIOLOGICAL_MINIMUM
    if value > boundaries[-1]:
        return Zone.ABOVE_BIOLOGICAL_MAXIMUM

    best: Optional[Tuple[Zone, int]] = None
    for index, (zone, depth) in enumerate(layout):
        low, high = boundaries[index], boundaries[index + 1]
        if low <= value <= high and (best is None or depth > best[1]):
            best = (zone, depth)
    return best[0] if best else Zone.NOT_CLASSIFIED
