from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Column role and column map models.

A role is the meaning of a column (name / IC number / position), independent of
the header wording a user typed or where the column sits in the sheet.
Column positions are 1-based integer indices; display letters are produced only
when logging or writing files.
"""

__all__ = [
    "ColumnRole",
    "ColumnMap",
    "HeaderVariants",
    "DEFAULT_HEADER_VARIANTS",
    "DEFAULT_POSITION_LABEL",
]


class ColumnRole(Enum):
    """Semantic roles recognized in header rows."""
    NAME = "name"
    IDENTITY_NUMBER = "identity_number"
    POSITION = "position"


# Header label written when the primary sheet has no position column
DEFAULT_POSITION_LABEL = "Designation"


@dataclass(frozen=True)
class HeaderVariants:
    """Accepted normalized header strings per role.

    Matching is exact against the normalized header; there is no substring or
    fuzzy matching, so "emp name" does not match the name role.
    """
    name: frozenset[str]
    identity_number: frozenset[str]
    position: frozenset[str]

    def for_role(self, role: ColumnRole) -> frozenset[str]:
        return getattr(self, role.value)

    def role_of(self, normalized_header: str) -> ColumnRole | None:
        """Return the role whose variant set holds the header, if any.

        Roles are tried in declaration order so a header listed under two roles
        resolves to the first one.
        """
        for role in ColumnRole:
            if normalized_header in self.for_role(role):
                return role
        return None


DEFAULT_HEADER_VARIANTS = HeaderVariants(
    name=frozenset({"name", "nama", "full name", "employee name"}),
    identity_number=frozenset({"i.c. no.", "ic no", "ic number", "ic", "i.c no", "i.c. number"}),
    position=frozenset({"position", "designation", "jawatan", "job title"}),
)


@dataclass(frozen=True)
class ColumnMap:
    """Resolved column positions for both sheets.

    Suffix 1 is the primary sheet (the one being updated), suffix 2 the
    secondary sheet (source of IC numbers and positions).
    """
    name1: int
    ic1: int
    name2: int
    ic2: int
    position1: int | None = None
    position2: int | None = None  # None -> secondary sheet carries no position data
    synthesized: frozenset[ColumnRole] = field(default_factory=frozenset)  # primary roles created by the resolver
