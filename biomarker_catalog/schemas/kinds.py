"""Input shape of a biomarker reading.

Every biomarker is exactly one of these kinds; callers dispatch on the type
instead of checking id lists.
"""

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Scalar:
    """One value with one unit."""


@dataclass(frozen=True)
class MultiValue:
    """Several values recorded together, e.g. systolic/diastolic pressure."""

    count: int
    units: Tuple[str, ...]


@dataclass(frozen=True)
class ParameterObject:
    """Structured parameters take the place of the value/unit pair."""

    schema: Tuple[str, ...]


@dataclass(frozen=True)
class Panel:
    """Laboratory panel: many LOINC-coded readings share one timestamp."""

    specimen: str


BiomarkerKind = Union[Scalar, MultiValue, ParameterObject, Panel]
