"""Biomarker reference catalog.

Canonical biomarker records, their multi-axis age-indexed reference ranges,
and the logic that normalizes, merges, exports and classifies against them.
"""

__version__ = "0.1.0"
