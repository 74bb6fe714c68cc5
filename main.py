#!/usr/bin/env python3
"""
Main entry point for the Twitch chat logger
"""

from chatlog.main import run

if __name__ == "__main__":
    run()
