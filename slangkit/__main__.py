"""
Entry point for running slangkit as a module.

Usage: python -m slangkit [command] [options]
"""

from slangkit.cli.parser import main

if __name__ == "__main__":
    main()
