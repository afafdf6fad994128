from typing import Any, Dict, List, Mapping

import structlog

from habilitation.core.models import ApplicationRecord, BreakdownEntry, ScoreResult
from habilitation.core.parsing import record_from_mapping, validate_application
from habilitation.core.repositories import JsonPointTableRepository, PointTableRepository
from habilitation.core.rule_factory import RuleFactory, build_eligibility_rule
from habilitation.core.rules import round_half_up
from habilitation.grids.researcher.loaders import load_messages, load_points, load_policy
from habilitation.grids.researcher.policy import ResearcherGridPolicy

logger = structlog.get_logger(__name__)

DEFAULT_MIN_TOTAL_POINTS = 350
DEFAULT_MIN_TEACHING_YEARS = 3


class ScoringEngine:
    """
    Maps an application record to its point total, itemized breakdown and
    eligibility verdict. Holds no mutable state: one instance is shared by
    every request.

    Two entry points over raw form data:
      - calculate(): authoritative, validates strictly first
      - preview():   lenient, bad or missing numbers count as zero
    """

    def __init__(
        self,
        repo: PointTableRepository,
        policy: ResearcherGridPolicy,
        messages: Dict[str, str],
        min_total_points: float = DEFAULT_MIN_TOTAL_POINTS,
        min_teaching_years: int = DEFAULT_MIN_TEACHING_YEARS,
    ):
        self.repo = repo
        self.policy = policy
        self.messages = messages
        self.min_total_points = min_total_points
        self.min_teaching_years = min_teaching_years
        self.eligibility = build_eligibility_rule(
            policy, messages, min_total_points, min_teaching_years
        )

    def compute_score(self, record: ApplicationRecord) -> ScoreResult:
        total = 0.0
        entries: List[BreakdownEntry] = []
        for rule in self.repo.list_rules():
            contribution = rule.score(record)
            # the total keeps un-rounded contributions; each entry is rounded on its own
            total += contribution.raw_points
            if contribution.raw_points > 0:
                entries.append(contribution.to_entry())

        # sorted() is stable: ties keep point-table order
        breakdown = tuple(
            e for e in sorted(entries, key=lambda e: e.points, reverse=True) if e.points > 0
        )

        verdict = self.eligibility.evaluate(record, total)
        if verdict.passed:
            reason = self.messages["eligible"]
        else:
            reason = self.messages["not_eligible_prefix"] + verdict.explanation

        result = ScoreResult(
            total_points=round_half_up(total),
            eligible=verdict.passed,
            eligibility_reason=reason,
            breakdown=breakdown,
            teaching_years=record.teaching_years,
            has_required_publication=self.policy.has_required_publication(record),
        )
        logger.debug(
            "score_computed",
            total_points=result.total_points,
            eligible=result.eligible,
            entries=len(breakdown),
        )
        return result

    def validate(self, data: Mapping[str, Any]) -> None:
        validate_application(data, self.min_teaching_years)

    def preview(self, data: Mapping[str, Any]) -> ScoreResult:
        return self.compute_score(record_from_mapping(data))

    def calculate(self, data: Mapping[str, Any]) -> ScoreResult:
        self.validate(data)
        return self.compute_score(record_from_mapping(data))


def build_engine(
    data_root: str,
    language: str,
    min_total_points: float = DEFAULT_MIN_TOTAL_POINTS,
    min_teaching_years: int = DEFAULT_MIN_TEACHING_YEARS,
) -> ScoringEngine:
    policy = ResearcherGridPolicy(load_policy(data_root))
    messages = load_messages(data_root)[language]
    factory = RuleFactory(language=language)
    repo = JsonPointTableRepository(load_points(data_root), factory)
    logger.info(
        "engine_built",
        data_root=data_root,
        language=language,
        rules=len(repo.list_rules()),
        min_total_points=min_total_points,
        min_teaching_years=min_teaching_years,
    )
    return ScoringEngine(repo, policy, messages, min_total_points, min_teaching_years)
