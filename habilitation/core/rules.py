import math
from dataclasses import dataclass
from typing import Optional, Protocol

from habilitation.core.models import (
    ApplicationRecord,
    AuthorshipCounts,
    BreakdownEntry,
    PointRule,
    PublicationTier,
    RuleResult,
)
from habilitation.grids.researcher.policy import ResearcherGridPolicy

# Share of a tier's points by authorship rank: first / second / third and later.
FIRST_AUTHOR_WEIGHT = 1.0
SECOND_AUTHOR_WEIGHT = 0.5
LATER_AUTHOR_WEIGHT = 0.25


def round_half_up(value: float) -> int:
    # points are never negative, so floor(x + .5) is plain half-up
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class PointContribution:
    key: str
    label: str
    raw_points: float
    unit_count: int
    authorship_detail: Optional[AuthorshipCounts] = None

    def to_entry(self) -> BreakdownEntry:
        return BreakdownEntry(
            key=self.key,
            label=self.label,
            points=round_half_up(self.raw_points),
            unit_count=self.unit_count,
            authorship_detail=self.authorship_detail,
        )


class ScoringRule(Protocol):
    key: str
    label: str
    point_rule: PointRule

    def score(self, record: ApplicationRecord) -> PointContribution: ...


class EligibilityRule(Protocol):
    def evaluate(self, record: ApplicationRecord, total_points: float) -> RuleResult: ...


class ActivityCountRule:
    def __init__(self, field: str, point_rule: PointRule, label: str):
        self.key = field
        self.point_rule = point_rule
        self.label = label

    def score(self, record: ApplicationRecord) -> PointContribution:
        n = record.activity(self.key)
        raw = n * self.point_rule.points_per_unit
        return PointContribution(self.key, self.label, self.point_rule.apply_cap(raw), n)


class AuthorshipTierRule:
    """
    Publication tier: full points for first-author papers, half for second
    author, a quarter for third author or later. The cap applies to the
    weighted sum of the tier, not per paper.
    """
    def __init__(self, tier: PublicationTier, point_rule: PointRule, label: str):
        self.tier = tier
        self.key = tier.value
        self.point_rule = point_rule
        self.label = label

    def score(self, record: ApplicationRecord) -> PointContribution:
        counts = record.authorship(self.tier)
        p = self.point_rule.points_per_unit
        raw = (
            counts.first * p * FIRST_AUTHOR_WEIGHT
            + counts.second * p * SECOND_AUTHOR_WEIGHT
            + counts.third_plus * p * LATER_AUTHOR_WEIGHT
        )
        return PointContribution(
            self.key, self.label, self.point_rule.apply_cap(raw), counts.total, counts
        )


class MinimumPointsRule:
    def __init__(self, threshold: float, explanation: str):
        self.threshold = float(threshold)
        self.explanation = explanation

    def evaluate(self, record: ApplicationRecord, total_points: float) -> RuleResult:
        return RuleResult(total_points >= self.threshold, self.explanation)


class MinimumTeachingYearsRule:
    def __init__(self, min_years: int, explanation: str):
        self.min_years = int(min_years)
        self.explanation = explanation

    def evaluate(self, record: ApplicationRecord, total_points: float) -> RuleResult:
        return RuleResult(record.teaching_years >= self.min_years, self.explanation)


class RequiredPublicationRule:
    def __init__(self, policy: ResearcherGridPolicy, explanation: str):
        self.policy = policy
        self.explanation = explanation

    def evaluate(self, record: ApplicationRecord, total_points: float) -> RuleResult:
        return RuleResult(self.policy.has_required_publication(record), self.explanation)


class AndRule:
    """
    Passes when every rule passes. Unlike a short-circuit AND, every rule is
    evaluated so the explanation lists all failing conditions in rule order.
    """
    def __init__(self, *rules, separator: str = " | "):
        self.rules = list(rules)
        self.separator = separator

    def evaluate(self, record: ApplicationRecord, total_points: float) -> RuleResult:
        failures = []
        for r in self.rules:
            rr = r.evaluate(record, total_points)
            if not rr.passed:
                failures.append(rr.explanation)
        return RuleResult(not failures, self.separator.join(failures))
