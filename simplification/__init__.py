"""
Simplification package: shrink hand-drawn paths before snapping.

Public API:
- simplify_path, run_simplification, SimplificationResult
- SimplificationPolicy, SimplificationConfig
- precision_policy, fast_policy
"""

from .engine import SimplificationResult, run_simplification, simplify_path
from .policy import (
    SimplificationConfig,
    SimplificationPolicy,
    fast_policy,
    precision_policy,
)

__all__ = [
    "simplify_path",
    "run_simplification",
    "SimplificationResult",
    "SimplificationPolicy",
    "SimplificationConfig",
    "precision_policy",
    "fast_policy",
]
