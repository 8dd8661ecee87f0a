"""I/O helpers used by the sniper cog."""
