"""Exceptions for use in Kendo Taikai"""

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


# ========== Base Application Exception ==========


class KendoTaikaiException(Exception):
    """Base exception for all Kendo Taikai errors.

    All custom exceptions in the engine inherit from this class.
    This enables catching all engine-specific errors with a single except clause.
    """

    pass


# ========== Tournament Exceptions ==========


class TournamentException(KendoTaikaiException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class PrematureAdvancementException(TournamentStateException):
    """Raised when a stage is advanced while some of its matches are unfinished."""

    pass


class TeamNotFoundException(TournamentException):
    """Raised when a requested team cannot be found."""

    pass


class DuplicateTeamException(TournamentException):
    """Raised when attempting to register a team that already exists."""

    pass


# ========== Seeding Exceptions ==========


class SeedingException(KendoTaikaiException):
    """Base exception for seed group generation errors."""

    pass


class InvalidSeedingInputException(SeedingException):
    """Raised when the teams or group count cannot be seeded."""

    pass


# ========== Scoring Exceptions ==========


class ScoringException(KendoTaikaiException):
    """Base exception for duel scoring errors."""

    pass


class InvalidActionException(ScoringException):
    """Raised when an action references a participant outside the duel."""

    pass


class IllegalActionKindException(ScoringException):
    """Raised when an action kind is not allowed in the current context."""

    pass


class DuelCompletedException(ScoringException):
    """Raised when attempting to score a duel that already has a result."""

    pass


class DuelStateException(ScoringException):
    """Raised when a duel cannot perform the requested correction."""

    pass


# ========== Match Exceptions ==========


class MatchException(KendoTaikaiException):
    """Base exception for team match errors."""

    pass


class MatchStateException(MatchException):
    """Raised when a team match is in an invalid state for the requested operation."""

    pass


class OvertimeException(MatchException):
    """Raised when overtime is started or scored illegally."""

    pass


# ========== Bracket Exceptions ==========


class BracketException(KendoTaikaiException):
    """Base exception for bracket errors."""

    pass


class InvalidBracketException(BracketException):
    """Raised when a bracket cannot be built from the qualified teams."""

    pass


class BracketAdvanceException(BracketException):
    """Raised when a bracket match result cannot be applied."""

    pass


# ========== Validation Exceptions ==========


class ValidationException(KendoTaikaiException):
    """Base exception for validation errors."""

    pass


class RosterValidationException(ValidationException):
    """Raised when a team roster is invalid."""

    pass


# ========== File/Resource Exceptions ==========


class ResourceException(KendoTaikaiException):
    """Base exception for resource-related errors."""

    pass


class FileLoadException(ResourceException):
    """Raised when a file cannot be loaded."""

    pass


class FileSaveException(ResourceException):
    """Raised when a file cannot be saved."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(KendoTaikaiException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
