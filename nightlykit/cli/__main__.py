"""
Entry point for running nightlykit CLI as a module.

Usage: python -m nightlykit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
