from typing import Any, Dict

from habilitation.core.errors import GridConfigurationError
from habilitation.core.models import ACTIVITY_FIELDS, PointRule, PublicationTier
from habilitation.core.rules import (
    ActivityCountRule,
    AndRule,
    AuthorshipTierRule,
    MinimumPointsRule,
    MinimumTeachingYearsRule,
    RequiredPublicationRule,
)
from habilitation.grids.researcher.policy import ResearcherGridPolicy


class RuleFactory:
    """
    Build a single scoring rule from a points.json entry.
    The repository calls: factory.from_json(rule_cfg)
    Labels are resolved once, for the configured language.
    """

    def __init__(self, language: str) -> None:
        self.language = (language or "").lower()

    def _label(self, rule_cfg: Dict[str, Any], fallback: str) -> str:
        labels = rule_cfg.get("labels") or {}
        return labels.get(self.language) or fallback

    def _point_rule(self, rule_cfg: Dict[str, Any]) -> PointRule:
        cap = rule_cfg.get("max")
        return PointRule(
            points_per_unit=float(rule_cfg["points"]),
            cap=float(cap) if cap is not None else None,
        )

    def from_json(self, rule_cfg: Dict[str, Any]):
        rtype = (rule_cfg.get("type") or "").lower()

        # 1) simple count field, optionally capped
        if rtype == "activity":
            name = rule_cfg["field"]
            if name not in ACTIVITY_FIELDS:
                raise GridConfigurationError(f"Unknown activity field: {name!r}")
            return ActivityCountRule(name, self._point_rule(rule_cfg), self._label(rule_cfg, name))

        # 2) publication tier weighted by authorship rank
        if rtype == "publication_tier":
            try:
                tier = PublicationTier(rule_cfg["tier"])
            except ValueError:
                raise GridConfigurationError(f"Unknown publication tier: {rule_cfg['tier']!r}")
            return AuthorshipTierRule(tier, self._point_rule(rule_cfg), self._label(rule_cfg, tier.value))

        raise GridConfigurationError(f"Unknown rule type: {rule_cfg!r}")


def build_eligibility_rule(
    policy: ResearcherGridPolicy,
    messages: Dict[str, str],
    min_total_points: float,
    min_teaching_years: int,
) -> AndRule:
    # order is the order failing conditions are reported in
    return AndRule(
        MinimumPointsRule(min_total_points, messages["insufficient_points"]),
        MinimumTeachingYearsRule(min_teaching_years, messages["insufficient_teaching_years"]),
        RequiredPublicationRule(policy, messages["missing_publication"]),
        separator=messages["separator"],
    )
