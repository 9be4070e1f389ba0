from __future__ import annotations

import discord

from .messages import LIVE, Notification


def notification_embed(notification: Notification, footer: str) -> discord.Embed:
    color = discord.Color.red() if notification.kind == LIVE else discord.Color.blurple()
    embed = discord.Embed(
        title=notification.title,
        url=notification.url,
        description=notification.description,
        timestamp=notification.timestamp,
        color=color,
    )
    embed.set_footer(text=footer)
    return embed
