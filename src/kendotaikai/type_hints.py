"""Type hints used in Kendo Taikai."""

from typing import List, Literal, Optional, Tuple

# Side string constants (for runtime use)
TEAM1 = "team1"
TEAM2 = "team2"

# Why a team match was decided the way it was
TeamOutcomeReason = Literal["sets", "points", "tied", "overtime"]

# Ordered participant ids of a roster
Lineup = List[Optional[str]]
# Team id pairs for round-robin fixtures
Fixture = Tuple[str, str]
