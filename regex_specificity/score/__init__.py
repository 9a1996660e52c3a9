"""Specificity scorer: weight-decayed evaluation of a pattern tree."""

from regex_specificity.score.scorer import LOOK_SHIFT, MAX_SHIFT, STEP, U64_MAX, WEIGHT, score

__all__ = ["LOOK_SHIFT", "MAX_SHIFT", "STEP", "U64_MAX", "WEIGHT", "score"]
