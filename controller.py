"""
Inbound veto actions.

VetoController is the only thing that mutates sessions. Every action for a
channel runs under that channel's lock, validates and mutates first, and only
then asks the presenter to render prompts and announcements.
"""
import logging
import random
from typing import Optional

import coinflip
import helpers
import veto
from errors import InvalidOpponent, InvalidSide, NoActiveSession, NotYourTurn, SessionAlreadyActive
from state import SessionStore

logger = logging.getLogger(__name__)

COINFLIP_SIDE = "coinflip_side"
MATCH_FORMAT = "select_match_format"


class VetoController:
    def __init__(self, store: SessionStore, presenter, rng: Optional[random.Random] = None):
        """
        Args:
            store: Session registry shared with the sweep task
            presenter: Renders prompts and announcements; must provide
                ``prompt_choice``, ``announce`` and ``team_name`` coroutines
            rng: Randomness source for the coinflip
        """
        self.store = store
        self.presenter = presenter
        self.rng = rng

    async def start_coinflip(self, channel_id: int, initiator_id: int, opponent_id: Optional[int]) -> None:
        async with self.store.lock(channel_id):
            if self.store.exists(channel_id):
                raise SessionAlreadyActive()
            if opponent_id is None or opponent_id == initiator_id:
                raise InvalidOpponent()

            await self.presenter.prompt_choice(
                channel_id,
                initiator_id,
                veto.COIN_SIDES,
                helpers.format_coinflip_prompt(initiator_id, opponent_id),
                COINFLIP_SIDE,
                opponent_id=opponent_id,
            )

    async def choose_coinflip_side(
        self,
        channel_id: int,
        initiator_id: int,
        opponent_id: int,
        actor_id: int,
        side: str,
    ):
        async with self.store.lock(channel_id):
            if actor_id != initiator_id:
                raise NotYourTurn("❌ Only the person who initiated the coinflip can choose Heads or Tails.")
            if side not in veto.COIN_SIDES:
                raise InvalidSide("❌ Pick Heads or Tails.")
            if self.store.exists(channel_id):
                raise SessionAlreadyActive()

            flip = coinflip.resolve(side, self.rng)
            initiator_name = await self.presenter.team_name(channel_id, initiator_id) or "Team A"
            opponent_name = await self.presenter.team_name(channel_id, opponent_id) or "Team B"
            if flip.winner == "a":
                winner, loser = (initiator_id, initiator_name), (opponent_id, opponent_name)
            else:
                winner, loser = (opponent_id, opponent_name), (initiator_id, initiator_name)

            session = self.store.create(
                channel_id,
                team_a_id=winner[0],
                team_b_id=loser[0],
                team_a_name=winner[1],
                team_b_name=loser[1],
                map_pool=list(veto.ALL_MAPS),
            )
            logger.info(
                "Channel %s: coin landed on %s, %s chooses the format",
                channel_id, flip.landed_on, session.team_a_name,
            )

            await self.presenter.announce(
                channel_id,
                helpers.format_coinflip_result(initiator_id, opponent_id, flip, session.team_a_id),
            )
            await self.presenter.prompt_choice(
                channel_id,
                session.team_a_id,
                tuple(veto.MATCH_FORMATS),
                helpers.format_prompt(session.team_a_id, "choose the match format for the veto"),
                MATCH_FORMAT,
            )
            return session

    async def choose_format(self, channel_id: int, actor_id: int, match_type: str) -> None:
        async with self.store.lock(channel_id):
            session = self.store.get(channel_id)
            if session is None:
                raise NoActiveSession()
            veto.choose_format(session, actor_id, match_type)
            self.store.touch(channel_id)

            await self.presenter.announce(channel_id, helpers.format_format_selected(match_type))
            await self.presenter.announce(channel_id, helpers.format_veto_start(session))
            await self._prompt_next(session)

    async def submit_choice(
        self,
        channel_id: int,
        actor_id: int,
        value: str,
        expected_kind: Optional[str] = None,
    ) -> veto.VetoResult:
        async with self.store.lock(channel_id):
            session = self.store.get(channel_id)
            if session is None:
                raise NoActiveSession()
            result = veto.apply_choice(session, actor_id, value, expected_kind)
            self.store.touch(channel_id)

            await self.presenter.announce(channel_id, helpers.format_step_result(session, actor_id, result))
            if result.complete:
                self.store.remove(channel_id)
                logger.info("Channel %s: %s veto complete", channel_id, session.match_type)
                await self.presenter.announce(
                    channel_id,
                    helpers.format_summary(session),
                    image=helpers.create_summary_image(session),
                )
            else:
                await self._prompt_next(session)
            return result

    async def force_end(self, channel_id: int) -> None:
        async with self.store.lock(channel_id):
            if not self.store.remove(channel_id):
                raise NoActiveSession()
            logger.info("Channel %s: veto session force-ended", channel_id)
            await self.presenter.announce(channel_id, "✅ The veto session has been ended.")

    def sweep(self, max_age: float) -> int:
        count = self.store.sweep(max_age)
        if count > 0:
            logger.info("Cleaned up %d abandoned veto sessions, %d still active", count, len(self.store))
        return count

    async def _prompt_next(self, session) -> None:
        prompt = veto.current_prompt(session)
        await self.presenter.prompt_choice(
            session.channel_id,
            prompt.actor_id,
            prompt.options,
            helpers.format_prompt(prompt.actor_id, prompt.label),
            prompt.kind,
        )
