import random
from dataclasses import dataclass
from typing import Optional

from veto import COIN_SIDES

_rng = random.Random()


@dataclass
class CoinflipResult:
    team_a_side: str
    team_b_side: str
    landed_on: str
    winner: str  # "a" or "b"


def resolve(team_a_choice: str, rng: Optional[random.Random] = None) -> CoinflipResult:
    """Flip the coin for the initiator's Heads/Tails call; the opponent holds the other face."""
    if team_a_choice not in COIN_SIDES:
        raise ValueError(f"Unknown coin side: {team_a_choice!r}")
    team_b_side = "Tails" if team_a_choice == "Heads" else "Heads"
    landed_on = (rng or _rng).choice(COIN_SIDES)
    winner = "a" if landed_on == team_a_choice else "b"
    return CoinflipResult(team_a_choice, team_b_side, landed_on, winner)
