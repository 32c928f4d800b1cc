from hunkpatch.patching.engine import apply_patch_file, apply_patch_stream
from hunkpatch.patching.patch_models import ApplyOutcome, RunSummary
from hunkpatch.patching.report import Reporter

__all__ = [
    "ApplyOutcome",
    "Reporter",
    "RunSummary",
    "apply_patch_file",
    "apply_patch_stream",
]
