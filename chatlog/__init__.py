"""Durable Twitch chat logger over IRC-over-WebSocket."""

__version__ = "1.0.0"
