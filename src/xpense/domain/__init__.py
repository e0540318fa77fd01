"""Domain layer for xpense application."""
