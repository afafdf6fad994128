from types import MappingProxyType
from typing import Any, List, Mapping, Protocol, Tuple

from habilitation.core.models import PointRule
from habilitation.core.rule_factory import RuleFactory
from habilitation.core.rules import ScoringRule


class PointTableRepository(Protocol):
    def list_rules(self) -> Tuple[ScoringRule, ...]:
        ...

    def point_table(self) -> Mapping[str, PointRule]:
        ...


class JsonPointTableRepository:
    """
    Point table read from points.json. Rules are built once here and shared,
    read-only, by every engine call on both the strict and the preview path.
    """
    def __init__(self, points_json: List[Any], factory: RuleFactory):
        self.points_json = points_json
        self.factory = factory
        self._rules: Tuple[ScoringRule, ...] = tuple(factory.from_json(r) for r in points_json)
        self._table = MappingProxyType({r.key: r.point_rule for r in self._rules})

    def list_rules(self) -> Tuple[ScoringRule, ...]:
        return self._rules

    def point_table(self) -> Mapping[str, PointRule]:
        return self._table
