#!/usr/bin/env python3
"""
Main entry point for the Chuck Norris chat bot
"""

from chuckbot.main import run

if __name__ == "__main__":
    run()
