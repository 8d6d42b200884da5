"""Discord gateway implementation of VoiceSignaler."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from node_player.application.interfaces.voice_signaler import VoiceSignaler
from node_player.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from node_player.domain.player.value_objects import VoiceStateFrame

logger = logging.getLogger(__name__)


class DiscordVoiceSignaler(VoiceSignaler):
    """Sends voice state updates through a connected discord.py client.

    Room ids are guild ids and channel ids are voice channel ids, both as
    decimal strings.
    """

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot
        self._pending: set[asyncio.Task[None]] = set()

    def send_voice_state(self, room_id: str, frame: VoiceStateFrame) -> None:
        try:
            guild = self._bot.get_guild(int(room_id))
        except ValueError:
            guild = None
        if guild is None:
            logger.warning(LogTemplates.VOICE_GUILD_NOT_FOUND, room_id)
            return

        channel = None if frame.channel_id is None else discord.Object(id=int(frame.channel_id))
        task = asyncio.get_running_loop().create_task(
            guild.change_voice_state(
                channel=channel,
                self_mute=frame.self_mute,
                self_deaf=frame.self_deafen,
            )
        )
        self._pending.add(task)
        task.add_done_callback(lambda t: self._on_sent(room_id, t))

    def _on_sent(self, room_id: str, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(LogTemplates.VOICE_STATE_FAILED, room_id, error)

    async def wait_sent(self) -> None:
        """Wait until every frame handed off so far has been sent."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
