from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator


# { "<age>": [boundaries...] }, e.g. { "20": [0, 60, 60, 80, 160, 170, 200, 300] }
RangeList = Dict[str, List[float]]

EIGHT_FORMAT = 8
FOURTEEN_FORMAT = 14
BOUNDARY_FORMATS = (EIGHT_FORMAT, FOURTEEN_FORMAT)

# Secondary stratifications in lookup order when the caller does not name one
STRATIFICATIONS = ("ethnicity", "skin_type", "weight", "height", "bmi")

Stratification = Literal["ethnicity", "skin_type", "weight", "height", "bmi"]


class Axis(str, Enum):
    MALE = "male"
    FEMALE = "female"
    PREGNANT = "pregnant"
    POSTMENOPAUSAL = "postmenopausal"
    MENSES_PHASE = "menses_phase"
    FOLLICULAR_PHASE = "follicular_phase"
    OVULATION_PHASE = "ovulation_phase"
    LUTEAL_PHASE = "luteal_phase"
    DIVERSE = "diverse"


class Zone(str, Enum):
    BELOW_BIOLOGICAL_MINIMUM = "below_biological_minimum"
    CRITICAL_LOW = "critical_low"
    AT_RISK_LOW = "at_risk_low"
    NORMAL = "normal"
    OPTIMAL = "optimal"
    OPTIMAL_HIGH = "optimal_high"
    AT_RISK_HIGH = "at_risk_high"
    CRITICAL_HIGH = "critical_high"
    CRITICAL_BETWEEN = "critical_between"
    ABOVE_BIOLOGICAL_MAXIMUM = "above_biological_maximum"
    NOT_CLASSIFIED = "not_classified"

    @property
    def is_classified(self) -> bool:
        return self is not Zone.NOT_CLASSIFIED


def validate_range_list(value: Any) -> Optional[RangeList]:
    """Check the age keys and boundary arrays of a range list.

    Age keys are coerced to integer strings and the list is returned ordered
    by ascending age. Each array must hold 8 or 14 non-decreasing numbers.
    """
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError("range list must map age keys to boundary arrays")

    checked: Dict[int, List[float]] = {}
    for age, boundaries in value.items():
        try:
            age_key = int(str(age).strip())
        except ValueError:
            raise ValueError(f"age key {age!r} is not an integer")
        if age_key < 0:
            raise ValueError(f"age key {age!r} is negative")
        if not isinstance(boundaries, (list, tuple)) or len(boundaries) not in BOUNDARY_FORMATS:
            raise ValueError(
                f"boundaries for age {age_key} must have {EIGHT_FORMAT} or {FOURTEEN_FORMAT} values"
            )
        try:
            numbers = [float(b) for b in boundaries]
        except (TypeError, ValueError):
            raise ValueError(f"boundaries for age {age_key} must be numeric")
        for earlier, later in zip(numbers, numbers[1:]):
            if later < earlier:
                raise ValueError(f"boundaries for age {age_key} must be non-decreasing")
        checked[age_key] = numbers

    return {str(age): checked[age] for age in sorted(checked)}


class RangeSpecification(BaseModel):
    """Ranges for one demographic axis.

    `norm` applies when no secondary stratum matches the caller's context.
    """

    model_config = ConfigDict(extra="forbid")

    norm: Optional[RangeList] = None
    ethnicity: Optional[Dict[str, RangeList]] = None
    skin_type: Optional[Dict[str, RangeList]] = None
    weight: Optional[Dict[str, RangeList]] = None
    height: Optional[Dict[str, RangeList]] = None
    bmi: Optional[Dict[str, RangeList]] = None

    @field_validator("norm", mode="before")
    @classmethod
    def _check_norm(cls, v: Any) -> Optional[RangeList]:
        return validate_range_list(v)

    @field_validator(*STRATIFICATIONS, mode="before")
    @classmethod
    def _check_strata(cls, v: Any) -> Optional[Dict[str, RangeList]]:
        if v is None:
            return None
        if not isinstance(v, dict):
            raise ValueError("stratification must map stratum labels to range lists")
        return {str(label): validate_range_list(range_list) for label, range_list in v.items()}

    @property
    def is_usable(self) -> bool:
        return self.norm is not None or any(getattr(self, name) for name in STRATIFICATIONS)

    def stratum(self, stratification: str, label: str) -> Optional[RangeList]:
        strata = getattr(self, stratification, None) if stratification in STRATIFICATIONS else None
        if not strata:
            return None
        return strata.get(label)


class RangeSet(BaseModel):
    model_config = ConfigDict(extra="forbid")

    male: Optional[RangeSpecification] = None
    female: Optional[RangeSpecification] = None
    pregnant: Optional[RangeSpecification] = None
    postmenopausal: Optional[RangeSpecification] = None
    menses_phase: Optional[RangeSpecification] = None
    follicular_phase: Optional[RangeSpecification] = None
    ovulation_phase: Optional[RangeSpecification] = None
    luteal_phase: Optional[RangeSpecification] = None
    diverse: Optional[RangeSpecification] = None

    def for_axis(self, axis: Axis) -> Optional[RangeSpecification]:
        return getattr(self, Axis(axis).value)

    def axes(self) -> List[Axis]:
        return [axis for axis in Axis if getattr(self, axis.value) is not None]


class DemographicContext(BaseModel):
    """Who a reading belongs to, as far as reference ranges care."""

    model_config = ConfigDict(frozen=True)

    axis: Axis = Axis.DIVERSE
    stratification: Optional[Stratification] = None
    stratum: Optional[str] = None
