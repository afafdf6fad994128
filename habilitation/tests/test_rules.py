import pytest

from habilitation.core.models import (
    ApplicationRecord,
    AuthorshipCounts,
    PointRule,
    PublicationTier,
    RuleResult,
)
from habilitation.core.rules import (
    ActivityCountRule,
    AndRule,
    AuthorshipTierRule,
    MinimumPointsRule,
    MinimumTeachingYearsRule,
    RequiredPublicationRule,
    round_half_up,
)
from habilitation.grids.researcher.policy import ResearcherGridPolicy


def _record(**kwargs):
    base = dict(first_name="Amar", last_name="Said", specialization="sciences", teaching_years=5)
    base.update(kwargs)
    return ApplicationRecord(**base)


@pytest.mark.parametrize("value, expected", [(0.4, 0), (0.5, 1), (22.5, 23), (44.99, 45), (180.0, 180)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_capped_activity_keeps_unit_count():
    rule = ActivityCountRule("lessonsPerYear", PointRule(15, 45), "Annual lectures")
    contribution = rule.score(_record(activities={"lessonsPerYear": 10}))
    assert contribution.raw_points == 45
    entry = contribution.to_entry()
    assert entry.points == 45
    assert entry.unit_count == 10
    assert entry.authorship_detail is None


def test_uncapped_activity():
    rule = ActivityCountRule("onlineLessons", PointRule(15), "Online courses")
    assert rule.score(_record(activities={"onlineLessons": 7})).raw_points == 105


@pytest.mark.parametrize("counts, expected", [
    (AuthorshipCounts(first=1), 90),
    (AuthorshipCounts(second=1), 45),
    (AuthorshipCounts(third_plus=1), 22.5),
    (AuthorshipCounts(first=1, second=2, third_plus=4), 270),
])
def test_authorship_weighting(counts, expected):
    rule = AuthorshipTierRule(PublicationTier.A, PointRule(90), "Tier A")
    contribution = rule.score(_record(publications={PublicationTier.A: counts}))
    assert contribution.raw_points == expected
    assert contribution.unit_count == counts.total
    assert contribution.authorship_detail == counts


def test_third_author_entry_is_rounded_half_up():
    rule = AuthorshipTierRule(PublicationTier.A, PointRule(90), "Tier A")
    entry = rule.score(_record(publications={PublicationTier.A: AuthorshipCounts(third_plus=1)})).to_entry()
    assert entry.points == 23


def test_tier_cap_applies_to_weighted_sum():
    rule = AuthorshipTierRule(PublicationTier.C, PointRule(40, 80), "Tier C")
    contribution = rule.score(_record(publications={PublicationTier.C: AuthorshipCounts(first=3, second=2)}))
    assert contribution.raw_points == 80
    assert contribution.unit_count == 5


def test_threshold_rules():
    record = _record(teaching_years=2)
    assert MinimumPointsRule(350, "points").evaluate(record, 350.0).passed
    assert not MinimumPointsRule(350, "points").evaluate(record, 349.5).passed
    assert not MinimumTeachingYearsRule(3, "years").evaluate(record, 0).passed
    assert MinimumTeachingYearsRule(2, "years").evaluate(record, 0).passed


def test_required_publication_rule_uses_policy():
    policy = ResearcherGridPolicy({"required_publication_tiers": {"sciences": ["A"]}})
    rule = RequiredPublicationRule(policy, "publication")
    with_paper = _record(publications={PublicationTier.A: AuthorshipCounts(second=1)})
    assert rule.evaluate(with_paper, 0).passed
    assert not rule.evaluate(_record(), 0).passed


class _Fixed:
    def __init__(self, passed, explanation):
        self.result = RuleResult(passed, explanation)

    def evaluate(self, record, total_points):
        return self.result


def test_and_rule_lists_every_failure_in_order():
    rule = AndRule(_Fixed(False, "one"), _Fixed(True, "two"), _Fixed(False, "three"), separator=", ")
    rr = rule.evaluate(_record(), 0)
    assert rr.passed is False
    assert rr.explanation == "one, three"


def test_and_rule_passes_when_all_pass():
    rr = AndRule(_Fixed(True, "one"), _Fixed(True, "two")).evaluate(_record(), 0)
    assert rr.passed is True
    assert rr.explanation == ""
