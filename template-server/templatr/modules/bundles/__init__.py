"""Public exports for script bundling."""

from .models import BUNDLE_PATTERN, Bundle, BundlePlan, bundle_path, match_bundle_index
from .planner import BundlePlanner

__all__ = [
    "BUNDLE_PATTERN",
    "Bundle",
    "BundlePlan",
    "BundlePlanner",
    "bundle_path",
    "match_bundle_index",
]
