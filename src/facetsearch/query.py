"""
Listing Query Accumulator

The shared, mutable query object that filters contribute constraints to.
Execution is left to the storage layer; this object only collects query
variables and constraint groups.
"""

from copy import deepcopy
from enum import Enum
from typing import Any, Dict, List, Optional


class ConstraintKind(str, Enum):
    """Constraint groups supported by the listing query."""
    TAXONOMY = "tax_query"
    META = "meta_query"


class Relation(str, Enum):
    """How constraints within one group combine."""
    AND = "AND"
    OR = "OR"


class ListingQuery:
    """
    Mutable query-constraint accumulator.

    Scalar query variables are stored with ``get``/``set``. Constraint groups
    are lists of plain dictionaries; ``get_constraint_group`` hands out a copy
    so a mutator has to read, append and write the group back explicitly.
    """

    def __init__(self, args: Optional[Dict[str, Any]] = None):
        self._vars: Dict[str, Any] = dict(args or {})
        self._groups: Dict[ConstraintKind, List[Dict[str, Any]]] = {}
        self._relations: Dict[ConstraintKind, Relation] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._vars.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._vars[key] = value

    def unset(self, key: str) -> None:
        self._vars.pop(key, None)

    def get_constraint_group(self, kind: ConstraintKind) -> List[Dict[str, Any]]:
        """Return a copy of the constraints accumulated for ``kind``."""
        group = self._groups.get(ConstraintKind(kind), [])
        if not isinstance(group, list):
            return []
        return list(group)

    def set_constraint_group(self, kind: ConstraintKind, constraints: List[Dict[str, Any]]) -> None:
        self._groups[ConstraintKind(kind)] = list(constraints)

    def get_relation(self, kind: ConstraintKind) -> Relation:
        return self._relations.get(ConstraintKind(kind), Relation.AND)

    def set_relation(self, kind: ConstraintKind, relation: Relation) -> None:
        self._relations[ConstraintKind(kind)] = Relation(relation)

    def add_constraint(self, kind: ConstraintKind, constraint: Dict[str, Any]) -> None:
        """Append one constraint to a group without dropping earlier ones."""
        group = self.get_constraint_group(kind)
        group.append(constraint)
        self.set_constraint_group(kind, group)

    @property
    def vars(self) -> Dict[str, Any]:
        return dict(self._vars)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the argument structure handed to the storage layer."""
        data = deepcopy(self._vars)
        for kind, constraints in self._groups.items():
            if not constraints:
                continue
            data[kind.value] = {
                'relation': self.get_relation(kind).value,
                'constraints': deepcopy(constraints),
            }
        return data

    def __repr__(self) -> str:
        return f"ListingQuery({self.to_dict()!r})"
