from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..models.system import SystemId
from .base import RuleSet
from .brb import BrbIncontaRuleSet
from .crefisa import GlmCrefisacpRuleSet, Tech2RuleSet
from .facta import FactaRuleSet
from .generic import GENERIC_SYSTEMS, GenericRuleSet
from .neocredito import NeocreditoRuleSet
from .pan import LevRuleSet, PanRuleSet
from .qualibanking import QualibankingRuleSet
from .queromais import QueroMaisRuleSet
from .unno import UnnoRuleSet
from .v8digital import V8DigitalRuleSet

"""System identifier -> rule set registry.

Built once at import. Rule sets hold no per-invocation state, so a single
instance per partner is shared by every call.
"""

__all__ = [
    "RULE_SETS",
    "get_rule_set",
]


def _build_registry() -> Mapping[SystemId, RuleSet]:
    rule_sets: list[RuleSet] = [
        V8DigitalRuleSet(),
        UnnoRuleSet(),
        PanRuleSet(),
        LevRuleSet(),
        BrbIncontaRuleSet(),
        GlmCrefisacpRuleSet(),
        QueroMaisRuleSet(),
        QualibankingRuleSet(),
        NeocreditoRuleSet(),
        Tech2RuleSet(),
        FactaRuleSet(),
    ]
    rule_sets.extend(GenericRuleSet(system) for system in GENERIC_SYSTEMS)

    registry = {rule_set.system: rule_set for rule_set in rule_sets}
    unregistered = [s.value for s in SystemId if s not in registry]
    if unregistered:
        raise RuntimeError(f"systems without a rule set: {unregistered}")
    return MappingProxyType(registry)


RULE_SETS: Mapping[SystemId, RuleSet] = _build_registry()


def get_rule_set(system: SystemId | str) -> RuleSet:
    """Return the rule set for ``system``.

    Raises:
        UnknownSystemError: if ``system`` is not a known identifier
    """
    return RULE_SETS[SystemId.parse(system)]
