"""
Reference range resolution
Selects the range specification for a demographic context, the age bracket
within it, and classifies a value into a zone.

A missing range for a context/age is an expected outcome in a sparse
reference dataset and is reported as Zone.NOT_CLASSIFIED, never raised.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from biomarker_catalog.schemas.biomarker import Biomarker
from biomarker_catalog.schemas.ranges import (
    Axis,
    DemographicContext,
    RangeList,
    RangeSet,
    RangeSpecification,
    STRATIFICATIONS,
    Zone,
)
from .engine import classify_zone, select_age_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ZoneResolution:
    zone: Zone
    axis: Optional[Axis] = None
    stratification: Optional[str] = None
    stratum: Optional[str] = None
    age_key: Optional[str] = None
    boundaries: Optional[Tuple[float, ...]] = None

    @property
    def is_classified(self) -> bool:
        return self.zone.is_classified


NOT_CLASSIFIED = ZoneResolution(zone=Zone.NOT_CLASSIFIED)


def select_specification(ranges: RangeSet, axis: Axis) -> Tuple[Optional[Axis], Optional[RangeSpecification]]:
    axis = Axis(axis)
    specification = ranges.for_axis(axis)
    if specification is not None:
        return axis, specification
    if axis is not Axis.DIVERSE and ranges.diverse is not None:
        return Axis.DIVERSE, ranges.diverse
    return None, None


def select_range_list(
    specification: RangeSpecification, context: DemographicContext
) -> Tuple[Optional[str], Optional[str], Optional[RangeList]]:
    """Stratum range list when the context names a matching label, else norm."""
    if context.stratum:
        candidates: List[str] = [context.stratification] if context.stratification else list(STRATIFICATIONS)
        for stratification in candidates:
            range_list = specification.stratum(stratification, context.stratum)
            if range_list is not None:
                return stratification, context.stratum, range_list
    return None, None, specification.norm


def resolve_detail(
    ranges: Optional[RangeSet], context: DemographicContext, age: float, value: float
) -> ZoneResolution:
    if ranges is None or age is None or age < 0:
        return NOT_CLASSIFIED
    if value is None or not math.isfinite(value):
        return NOT_CLASSIFIED

    axis, specification = select_specification(ranges, context.axis)
    if specification is None:
        logger.debug(f"No range specification for axis '{context.axis.value}'")
        return NOT_CLASSIFIED

    stratification, stratum, range_list = select_range_list(specification, context)
    if not range_list:
        logger.debug(f"No range list for axis '{axis.value}' and stratum '{context.stratum}'")
        return ZoneResolution(zone=Zone.NOT_CLASSIFIED, axis=axis)

    age_key = select_age_key(range_list, age)
    boundaries = tuple(range_list[age_key])
    return ZoneResolution(
        zone=classify_zone(boundaries, value),
        axis=axis,
        stratification=stratification,
        stratum=stratum,
        age_key=age_key,
        boundaries=boundaries,
    )


def resolve(ranges: Optional[RangeSet], context: DemographicContext, age: float, value: float) -> Zone:
    return resolve_detail(ranges, context, age, value).zone


def resolve_biomarker(
    biomarker: Biomarker,
    context: DemographicContext,
    age: float,
    value: float,
    z_score: bool = False,
) -> ZoneResolution:
    """Resolve against a catalog entry's ranges (or its z-score ranges)."""
    ranges = biomarker.ranges_z_score if z_score else biomarker.ranges
    return resolve_detail(ranges, context, age, value)
