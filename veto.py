"""
Veto sequence templates and the step-by-step state machine.

Nothing in here performs I/O: callers hand in a Session, get it mutated (or
a VetoError raised before anything changed) and decide what to render next.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from errors import (
    FormatAlreadyChosen,
    InvalidFormat,
    InvalidMap,
    InvalidSide,
    NotYourTurn,
    VetoStateError,
)
from state import MapResult, Session

logger = logging.getLogger(__name__)

# ─── Catalogue ─────────────────────────────────────────────────────────────────
ALL_MAPS = ("Ascent", "Icebox", "Sunset", "Haven", "Lotus", "Pearl", "Split")
MATCH_FORMATS = {
    "BO1": "Best of 1",
    "BO3": "Best of 3",
    "BO5": "Best of 5",
}
MAPS_PLAYED = {"BO1": 1, "BO3": 3, "BO5": 5}
SIDES = ("Attacker", "Defender")
COIN_SIDES = ("Heads", "Tails")

BAN = "ban"
PICK_MAP = "pick_map"
PICK_SIDE = "pick_side"


def opposite_side(side: str) -> str:
    return "Attacker" if side == "Defender" else "Defender"


# ─── Steps ─────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class Ban:
    by: int
    kind = BAN


@dataclass(frozen=True)
class PickMap:
    by: int
    kind = PICK_MAP


@dataclass(frozen=True)
class PickSide:
    by: int
    map_index: int
    kind = PICK_SIDE


def generate_sequence(match_type: str, team_a_id: int, team_b_id: int) -> tuple:
    """
    Build the ordered veto steps for a format.

    Team A is the coinflip winner. The last map of every format is never
    picked explicitly: it is whatever survives the bans and picks.
    """
    A, B = team_a_id, team_b_id
    if match_type == "BO1":
        return (
            Ban(A), Ban(B),
            Ban(A), Ban(B),
            Ban(A), Ban(B),
            PickSide(A, 0),
        )
    if match_type == "BO3":
        return (
            Ban(A), Ban(B),
            PickMap(A), PickSide(B, 0),
            PickMap(B), PickSide(A, 1),
            Ban(A), Ban(B),
            PickSide(A, 2),
        )
    if match_type == "BO5":
        return (
            Ban(A), Ban(B),
            PickMap(A), PickSide(B, 0),
            PickMap(B), PickSide(A, 1),
            PickMap(A), PickSide(B, 2),
            PickMap(B), PickSide(A, 3),
            PickSide(A, 4),
        )
    raise ValueError(f"Unsupported match format: {match_type!r}")


# ─── State machine ─────────────────────────────────────────────────────────────
@dataclass
class VetoResult:
    step: object
    value: str
    map_name: str
    complete: bool


@dataclass
class Prompt:
    kind: str
    actor_id: int
    options: tuple
    label: str


def choose_format(session: Session, actor_id: int, match_type: str) -> None:
    if actor_id != session.team_a_id:
        raise NotYourTurn("❌ Only the coinflip winner can pick the match format.")
    if session.match_type:
        raise FormatAlreadyChosen()
    if match_type not in MATCH_FORMATS:
        raise InvalidFormat()

    session.veto_sequence = generate_sequence(match_type, session.team_a_id, session.team_b_id)
    session.match_type = match_type
    session.map_pool = list(ALL_MAPS)
    session.veto_step = 0
    session.picks = []
    logger.info("Channel %s: %s veto started", session.channel_id, match_type)


def _side_map(session: Session, step: PickSide) -> Optional[str]:
    """Name of the map a side pick applies to, without touching picks."""
    if step.map_index < len(session.picks):
        return session.picks[step.map_index].map
    if step.map_index == len(session.picks) and len(session.map_pool) == 1:
        return session.map_pool[0]
    return None


def _wrong_value(step) -> Exception:
    return InvalidSide() if step.kind == PICK_SIDE else InvalidMap()


def apply_choice(
    session: Session,
    actor_id: int,
    value: str,
    expected_kind: Optional[str] = None,
) -> VetoResult:
    """
    Validate and apply one veto action, then advance the step cursor.

    Raises NotYourTurn, InvalidMap or InvalidSide without mutating anything.
    ``expected_kind`` is the step kind the submitting UI was built for; a
    mismatch means the prompt is stale.
    """
    step = session.current_step
    if step is None or actor_id != step.by:
        raise NotYourTurn()
    if expected_kind is not None and expected_kind != step.kind:
        raise _wrong_value(step)

    if step.kind == PICK_SIDE:
        if value not in SIDES:
            raise InvalidSide()
        map_name = _side_map(session, step)
        if map_name is None:
            raise VetoStateError(
                f"No map at index {step.map_index} for side pick "
                f"(picks={len(session.picks)}, pool={session.map_pool})"
            )
        if step.map_index == len(session.picks):
            session.picks.append(MapResult(map=map_name))
        result = session.picks[step.map_index]
        sides = {actor_id: value, session.other_team(actor_id): opposite_side(value)}
        result.team_a_side = sides[session.team_a_id]
        result.team_b_side = sides[session.team_b_id]
    else:
        if value not in session.map_pool:
            raise InvalidMap()
        session.map_pool.remove(value)
        map_name = value
        if step.kind == PICK_MAP:
            session.picks.append(MapResult(map=value))

    session.veto_step += 1
    return VetoResult(step=step, value=value, map_name=map_name, complete=session.is_complete)


def current_prompt(session: Session) -> Optional[Prompt]:
    step = session.current_step
    if step is None:
        return None
    if step.kind == PICK_SIDE:
        map_name = _side_map(session, step)
        if map_name is None:
            raise VetoStateError(f"No map to pick a side for at index {step.map_index}")
        return Prompt(PICK_SIDE, step.by, SIDES, f"pick a side for **{map_name}**")
    label = "ban a map" if step.kind == BAN else "pick a map"
    return Prompt(step.kind, step.by, tuple(session.map_pool), label)
