"""Validation utilities for Kendo Taikai.

This module provides reusable validation functions with consistent error handling.
"""

from typing import List, Optional, Sequence

from kendotaikai.constants import MAX_TEAMS_PER_GROUP, TEAM_SIZE
from kendotaikai.exceptions import (
    InvalidSeedingInputException,
    RosterValidationException,
)
from kendotaikai.models.team import Team


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        missing_positions: Duel positions (1-7) without a participant
        warnings: Non-fatal findings for the moderator
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        missing_positions: Optional[List[int]] = None,
        warnings: Optional[List[str]] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.missing_positions = missing_positions or []
        self.warnings = warnings or []

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, warnings={len(self.warnings)})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Roster Validation ==========


def validate_team_roster(team: Team) -> ValidationResult:
    """Check whether a team can field a lineup.

    A roster is valid as long as at least one player is present. Empty
    positions are reported so the moderator knows which duels will be
    forfeited.

    Args:
        team: Team to check

    Returns:
        ValidationResult with missing positions and warnings

    Example:
        >>> result = validate_team_roster(team)
        >>> if not result:
        ...     print(result.error_message)
    """
    lineup = team.lineup()
    missing = [i + 1 for i, pid in enumerate(lineup) if pid is None]
    warnings: List[str] = []

    if len(team.players) > TEAM_SIZE:
        warnings.append(
            f"Roster has {len(team.players)} players, "
            f"only the first {TEAM_SIZE} will fight"
        )
    if missing:
        positions = ", ".join(str(p) for p in missing)
        warnings.append(f"No player at position(s) {positions}: those duels are forfeited")

    if not team.players:
        return ValidationResult(
            is_valid=False,
            error_message=f"Team {team.name} has no players",
            missing_positions=missing,
            warnings=warnings,
        )
    return ValidationResult(is_valid=True, missing_positions=missing, warnings=warnings)


def validate_team_roster_strict(team: Team) -> None:
    """Validate a roster and raise if it cannot be used.

    Raises:
        RosterValidationException: If the roster is empty, larger than seven
            or lists the same participant twice
    """
    if len(team.players) > TEAM_SIZE:
        raise RosterValidationException(
            f"Team {team.name} has {len(team.players)} players (maximum {TEAM_SIZE})"
        )
    ids = [p.id for p in team.players]
    if len(set(ids)) != len(ids):
        raise RosterValidationException(
            f"Team {team.name} lists the same participant more than once"
        )
    result = validate_team_roster(team)
    if not result.is_valid:
        raise RosterValidationException(result.error_message)


# ========== Seeding Input Validation ==========


def validate_seeding_input(teams: Sequence[Team], requested_groups: int) -> None:
    """Reject input the seed group generator cannot work with.

    Raises:
        InvalidSeedingInputException: If there are no teams, the group count
            is below one or team ids repeat
    """
    if not teams:
        raise InvalidSeedingInputException("Cannot seed groups without teams")
    if requested_groups < 1:
        raise InvalidSeedingInputException(
            f"Requested group count must be at least 1, got {requested_groups}"
        )
    ids = [t.id for t in teams]
    if len(set(ids)) != len(ids):
        raise InvalidSeedingInputException("Team ids must be unique")


def effective_group_count(
    team_count: int, requested_groups: int, max_per_group: int = MAX_TEAMS_PER_GROUP
) -> int:
    """Number of groups to open: at least enough to hold every team."""
    needed = -(-team_count // max_per_group)
    return max(requested_groups, needed)
