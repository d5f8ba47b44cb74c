from typing import Optional


class CatalogError(Exception):
    """Base class for biomarker catalog errors"""
    pass


class NormalizationError(CatalogError):
    """A single import record could not be turned into a canonical biomarker.

    Fatal to that record only; batch callers skip it and carry on.
    """

    def __init__(self, message: str, record_id: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id
        self.field = field


class MissingRequiredField(NormalizationError):
    pass


class MalformedNumericField(NormalizationError):
    pass


class InvalidEnumeratedField(NormalizationError):
    pass


class MalformedRangeField(NormalizationError):
    pass


class ImportRowError(CatalogError):
    """A raw tabular row does not match the biomarker's import format"""
    pass


class DuplicateBiomarkerError(CatalogError):
    pass


class BiomarkerNotFoundError(CatalogError):
    pass
