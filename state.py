import time
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

AWAITING_FORMAT = "awaiting_format_choice"
RUNNING = "running"
COMPLETE = "complete"


# ─── Session records ───────────────────────────────────────────────────────────
@dataclass
class MapResult:
    map: str
    team_a_side: Optional[str] = None
    team_b_side: Optional[str] = None


@dataclass
class Session:
    channel_id: int
    team_a_id: int
    team_b_id: int
    team_a_name: str = "Team A"
    team_b_name: str = "Team B"
    match_type: str = ""
    map_pool: list = field(default_factory=list)
    veto_sequence: tuple = ()
    veto_step: int = 0
    picks: list = field(default_factory=list)
    created_at: float = 0.0
    last_activity: float = 0.0

    @property
    def phase(self) -> str:
        if not self.match_type:
            return AWAITING_FORMAT
        if self.veto_step >= len(self.veto_sequence):
            return COMPLETE
        return RUNNING

    @property
    def is_complete(self) -> bool:
        return self.phase == COMPLETE

    @property
    def current_step(self):
        """The step waiting for input, or None outside the running phase."""
        if self.phase != RUNNING:
            return None
        return self.veto_sequence[self.veto_step]

    def other_team(self, team_id: int) -> int:
        return self.team_b_id if team_id == self.team_a_id else self.team_a_id

    def team_name(self, team_id: int) -> str:
        return self.team_a_name if team_id == self.team_a_id else self.team_b_name

    def side_of(self, result: MapResult, team_id: int) -> Optional[str]:
        if team_id == self.team_a_id:
            return result.team_a_side
        return result.team_b_side


# ─── Per-channel registry ──────────────────────────────────────────────────────
class SessionStore:
    """
    Maps a channel id to its single live veto session.

    One store is built at startup and handed to whoever needs it. ``create``
    overwrites blindly; enforcing one session per channel is the caller's job.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._sessions: dict[int, Session] = {}
        self._locks: dict[int, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def lock(self, channel_id: int) -> asyncio.Lock:
        """Lock serializing every action against one channel."""
        return self._locks.setdefault(channel_id, asyncio.Lock())

    def create(self, channel_id: int, **fields) -> Session:
        now = self._clock()
        session = Session(channel_id=channel_id, **fields)
        session.created_at = now
        session.last_activity = now
        self._sessions[channel_id] = session
        return session

    def get(self, channel_id: int) -> Optional[Session]:
        return self._sessions.get(channel_id)

    def touch(self, channel_id: int) -> None:
        session = self._sessions.get(channel_id)
        if session:
            session.last_activity = self._clock()

    def exists(self, channel_id: int) -> bool:
        return channel_id in self._sessions

    def remove(self, channel_id: int) -> bool:
        return self._sessions.pop(channel_id, None) is not None

    def sweep(self, max_age: float) -> int:
        """Drop sessions idle for more than ``max_age`` seconds; return how many."""
        now = self._clock()
        stale = [
            ch for ch, session in self._sessions.items()
            if now - session.last_activity > max_age
        ]
        for ch in stale:
            del self._sessions[ch]
            logger.debug("Swept idle veto session in channel %s", ch)
        return len(stale)
