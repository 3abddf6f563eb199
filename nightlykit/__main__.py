"""
Entry point for running nightlykit CLI as a module.

Usage: python -m nightlykit [command] [options]
"""

from nightlykit.cli.parser import main

if __name__ == "__main__":
    main()
