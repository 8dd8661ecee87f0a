"""discord.py bot, cogs, and the session supervisor."""
