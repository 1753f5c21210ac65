#!/usr/bin/env python3
"""
Main application entry point for the scholar editor tools.
This module exposes the command-line interface defined in cli/main.py.
"""

from cli.main import app, main

if __name__ == "__main__":
    main()
