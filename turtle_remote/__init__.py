"""Websocket server, SQLite store and shared data model for remotely controlled mining turtles."""

__version__ = "0.1.0"