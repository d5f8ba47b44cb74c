from .biomarker import (
    Biomarker,
    BiomarkerInputSettings,
    BiomarkerSettings,
    ImportFormat,
    ValueType,
)
from .ranges import (
    Axis,
    DemographicContext,
    RangeList,
    RangeSet,
    RangeSpecification,
    STRATIFICATIONS,
    Zone,
)
