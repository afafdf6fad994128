# habilitation/grids/researcher/policy.py
from typing import Any, Dict, FrozenSet, Mapping

from habilitation.core.models import ApplicationRecord, PublicationTier


class ResearcherGridPolicy:
    """
    Researcher-professor evaluation grid (ministerial decisions 804/2021, 493/2022).

    Mandatory publication: the candidate needs at least one article, any
    authorship rank, in a tier accepted for their specialization:
      - sciences:   A+, A or B (tier C does not count)
      - humanities: A+, A, B or C
    Any other specialization value never satisfies the rule.
    Tier lists come from policy.json ("required_publication_tiers").
    """

    def __init__(self, policy_cfg: Dict[str, Any]):
        self.cfg = policy_cfg
        self.required_tiers: Dict[str, FrozenSet[PublicationTier]] = {
            spec: frozenset(PublicationTier(t) for t in tiers)
            for spec, tiers in policy_cfg.get("required_publication_tiers", {}).items()
        }
        self.specialization_labels: Mapping[str, Mapping[str, str]] = policy_cfg.get(
            "specialization_labels", {}
        )
        self.ministry_decisions = list(policy_cfg.get("ministry_decisions", []))

    def tier_totals(self, record: ApplicationRecord) -> Dict[PublicationTier, int]:
        return {tier: record.authorship(tier).total for tier in PublicationTier}

    def has_required_publication(self, record: ApplicationRecord) -> bool:
        accepted = self.required_tiers.get(record.specialization)
        if not accepted:
            return False
        totals = self.tier_totals(record)
        return sum(totals[t] for t in accepted) > 0

    def specialization_label(self, specialization: str, language: str) -> str:
        labels = self.specialization_labels.get(specialization)
        if not labels:
            return specialization
        return labels.get(language, specialization)
