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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"
LOG_LEVEL_ENV_VAR = "KENDO_TAIKAI_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

# Team match shape
TEAM_SIZE = 7  # one duel per roster position
DUEL_POINTS_TO_WIN = 2  # first to two valid strikes (ippon) takes the duel
HANSOKU_PER_POINT = 2  # two fouls hand the opponent one point
DEFAULT_DUEL_TIME_LIMIT = 180  # seconds

# Seed groups
MAX_TEAMS_PER_GROUP = 3
DEFAULT_GROUP_COUNT = 4
DEFAULT_QUALIFIERS_PER_GROUP = 2
MIN_TEAMS_FOR_SEED_STAGE = 2

# Group standings
STANDING_WIN_POINTS = 2
STANDING_DRAW_POINTS = 1
STANDING_LOSS_POINTS = 0

# Bracket
MIN_BRACKET_TEAMS = 2
GRAND_FINAL_ROUND = 999  # sentinel round number for the grand final

# Match status texts for the moderator view
STATUS_TEXT_IN_PROGRESS = "Match in progress"
STATUS_TEXT_OVERTIME = "Match tied - overtime required"

# Group names are lettered A, B, C, ...
GROUP_NAME_PREFIX = "Group"
GROUP_ID_PREFIX = "group"
