from __future__ import annotations

from .base import Classifier, RawRow, RuleContext, RuleSet
from .registry import RULE_SETS, get_rule_set

__all__ = [
    "Classifier",
    "RawRow",
    "RuleContext",
    "RuleSet",
    "RULE_SETS",
    "get_rule_set",
]
