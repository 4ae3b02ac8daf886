"""Every table model, imported in one place (alembic target_metadata, read models)."""
from __future__ import annotations

from mygm.modules.finance.models import FinanceEntry, WeeklySummary
from mygm.modules.planner.models import PlannedMatch, PlannedMatchParticipant
from mygm.modules.resolution.models import MatchLogEntry, MatchLogParticipant
from mygm.modules.rivalries.models import Rivalry
from mygm.modules.roster.models import Wrestler
from mygm.modules.saves.models import Save
from mygm.modules.titles.models import Title, TitleDefense, TitleReign

__all__ = [
    "FinanceEntry",
    "MatchLogEntry",
    "MatchLogParticipant",
    "PlannedMatch",
    "PlannedMatchParticipant",
    "Rivalry",
    "Save",
    "Title",
    "TitleDefense",
    "TitleReign",
    "WeeklySummary",
    "Wrestler",
]
