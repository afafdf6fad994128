from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class PublicationTier(Enum):
    A_PLUS = "A+"
    A = "A"
    B = "B"
    C = "C"


# Wire field names per tier: (first author, second author, third author or later)
PUBLICATION_FIELDS: Dict[PublicationTier, Tuple[str, str, str]] = {
    PublicationTier.A_PLUS: ("categoryAPlusFirst", "categoryAPlusSecond", "categoryAPlusThird"),
    PublicationTier.A: ("categoryAFirst", "categoryASecond", "categoryAThird"),
    PublicationTier.B: ("categoryBFirst", "categoryBSecond", "categoryBThird"),
    PublicationTier.C: ("categoryCFirst", "categoryCSecond", "categoryCThird"),
}

ACTIVITY_FIELDS: Tuple[str, ...] = (
    "lessonsPerYear",
    "guidedWorks",
    "practicalWorks",
    "onlineLessons",
    "printedLessons",
    "pedagogicalPublications",
    "supervisionYears",
    "internshipFollowUp",
    "universityEnvironment",
    "pedagogicalAnimation",
    "thesisSupervision",
    "internationalPatents",
    "nationalPatents",
    "internationalConferences",
    "indexedProceedings",
    "nationalConferences",
    "phdSupervision",
    "scientificPublications",
    "phdTraining",
    "eventOrganization",
    "internationalProjects",
    "scientificActivities",
    "researchActivities",
)


@dataclass(frozen=True)
class AuthorshipCounts:
    first: int = 0
    second: int = 0
    third_plus: int = 0

    @property
    def total(self) -> int:
        return self.first + self.second + self.third_plus

    def to_dict(self) -> Dict[str, int]:
        return {"first": self.first, "second": self.second, "thirdPlus": self.third_plus}


@dataclass(frozen=True)
class PointRule:
    points_per_unit: float
    cap: Optional[float] = None

    def apply_cap(self, raw: float) -> float:
        if self.cap is None:
            return raw
        return min(raw, self.cap)


@dataclass
class ApplicationRecord:
    first_name: str
    last_name: str
    specialization: str
    teaching_years: int = 0
    activities: Dict[str, int] = field(default_factory=dict)
    publications: Dict[PublicationTier, AuthorshipCounts] = field(default_factory=dict)
    university: str = ""
    department: str = ""
    specialization_field: str = ""
    email: str = ""

    def activity(self, name: str) -> int:
        return self.activities.get(name, 0)

    def authorship(self, tier: PublicationTier) -> AuthorshipCounts:
        return self.publications.get(tier, AuthorshipCounts())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass
class RuleResult:
    passed: bool
    explanation: str


@dataclass(frozen=True)
class BreakdownEntry:
    key: str
    label: str
    points: int
    unit_count: int
    authorship_detail: Optional[AuthorshipCounts] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "points": self.points,
            "unitCount": self.unit_count,
            "authorshipDetail": self.authorship_detail.to_dict() if self.authorship_detail else None,
        }


@dataclass(frozen=True)
class ScoreResult:
    total_points: int
    eligible: bool
    eligibility_reason: str
    breakdown: Tuple[BreakdownEntry, ...]
    teaching_years: int
    has_required_publication: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPoints": self.total_points,
            "eligible": self.eligible,
            "eligibilityReason": self.eligibility_reason,
            "breakdown": [entry.to_dict() for entry in self.breakdown],
            "teachingYears": self.teaching_years,
            "hasRequiredPublication": self.has_required_publication,
        }
