"""
Package entry point.

Allows running the application via:

    python -m schedulesync

This simply forwards execution to schedulesync.cli.main().
"""

from schedulesync.cli import main

if __name__ == "__main__":
    main()
