"""Round-trip pipeline: CSV codec, diff, apply and artifact regeneration.

Pipeline: tabular codec -> sheet import -> diff -> (review) -> apply ->
    regenerate.
"""

from pipeline.roundtrip.diff_engine import diff, select_changes, summarize
from pipeline.roundtrip.mutator import apply, apply_with_report
from pipeline.roundtrip.regenerator import Artifact, RegeneratedArtifacts, regenerate
from pipeline.roundtrip.sheet import EXPORT_COLUMNS, export_csv, import_csv

__all__ = [
    "EXPORT_COLUMNS",
    "Artifact",
    "RegeneratedArtifacts",
    "apply",
    "apply_with_report",
    "diff",
    "export_csv",
    "import_csv",
    "regenerate",
    "select_changes",
    "summarize",
]
