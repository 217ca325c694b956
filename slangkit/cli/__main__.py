"""
Entry point for running the slangkit CLI as a module.

Usage: python -m slangkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
