#!/usr/bin/env python3
"""
Convenience entry point for running dayfinder directly.

Usage: python -m dayfinder [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
