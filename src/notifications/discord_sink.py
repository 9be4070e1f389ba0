import logging

import discord

from .embeds import notification_embed
from .messages import Notification
from src.metrics.registry import notifications_sent_total, notification_failures_total

log = logging.getLogger(__name__)


class DiscordNotifier:
    def __init__(self, client: discord.Client, channel_id: int, footer: str = "TikTok Notifier"):
        self.client = client
        self.channel_id = channel_id
        self.footer = footer

    async def _resolve_channel(self):
        # Fetched on every send so a channel that was briefly unavailable recovers on its own.
        try:
            return await self.client.fetch_channel(self.channel_id)
        except (discord.NotFound, discord.Forbidden, discord.InvalidData) as e:
            log.warning("Discord channel %s not available: %s", self.channel_id, e)
            return None

    async def notify(self, notification: Notification) -> bool:
        """Deliver one notification; failures are logged and reported as False."""
        try:
            channel = await self._resolve_channel()
            if channel is None:
                notification_failures_total.labels(kind=notification.kind).inc()
                return False
            await channel.send(
                content=notification.mention,
                embed=notification_embed(notification, self.footer),
                allowed_mentions=discord.AllowedMentions(everyone=True),
            )
        except Exception as e:
            notification_failures_total.labels(kind=notification.kind).inc()
            log.error("Failed to send %s notification to Discord: %s", notification.kind, e)
            return False
        notifications_sent_total.labels(kind=notification.kind).inc()
        log.info("%s notification sent: %s", notification.kind.capitalize(), notification.url)
        return True
