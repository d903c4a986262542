"""A kendoka registered on a team roster."""

# Kendo Taikai
# Copyright (C) 2025  Kendo Taikai developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta

from kendotaikai.models.enums import KendoRank
from kendotaikai.utils import generate_id, setup_logger

logger = setup_logger(__name__)

KENDO_RANKS: List[KendoRank] = list(KendoRank)


def rank_order(rank: Optional[KendoRank]) -> int:
    """Sort value for a rank; higher means more senior. Unknown ranks sort first."""
    if rank is None:
        return 0
    return KENDO_RANKS.index(rank)


def rank_category(rank: Optional[KendoRank]) -> str:
    """Group a rank into ``mudansha``, ``kyu`` or ``dan``."""
    if rank is None or rank is KendoRank.MUDANSHA:
        return "mudansha"
    if rank.name.startswith("KYU"):
        return "kyu"
    return "dan"


def sort_by_rank(
    participants: Iterable["Participant"], descending: bool = True
) -> List["Participant"]:
    """Sort participants by grade, most senior first by default.

    The sort is stable, so participants of equal grade keep their order.
    """
    return sorted(
        participants, key=lambda p: rank_order(p.kendo_rank), reverse=descending
    )


@dataclass
class Participant:
    """A single competitor.

    Attributes:
        name: Full name
        kendo_rank: Current grade, if known
        date_of_birth: Used for age display only
        id: Unique identifier (generated when not supplied)
    """

    name: str
    kendo_rank: Optional[KendoRank] = None
    date_of_birth: Optional[date] = None
    id: str = field(default_factory=lambda: generate_id("Participant"))

    @property
    def age(self) -> Optional[int]:
        """Age in whole years, or None when the date of birth is unknown."""
        if self.date_of_birth is None:
            logger.debug("%s has no date of birth set", self.name)
            return None
        return relativedelta(date.today(), self.date_of_birth).years

    @property
    def rank_category(self) -> str:
        return rank_category(self.kendo_rank)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize participant to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "kendo_rank": self.kendo_rank.value if self.kendo_rank else None,
            "date_of_birth": (
                self.date_of_birth.isoformat() if self.date_of_birth else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Participant":
        """Deserialize participant from dictionary."""
        rank = data.get("kendo_rank")
        dob = data.get("date_of_birth")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            kendo_rank=KendoRank(rank) if rank else None,
            date_of_birth=date.fromisoformat(dob) if dob else None,
        )

    def __str__(self) -> str:
        if self.kendo_rank:
            return f"{self.name} ({self.kendo_rank.value})"
        return self.name
