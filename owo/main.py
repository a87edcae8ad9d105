#!/usr/bin/env python3
"""
Main entry point for the owo CLI.

This delegates to the UI layer in owo.ui.cli to keep the console
script mapping stable.
"""

from owo.ui.cli import run as owo


if __name__ == "__main__":
    owo()
