#!/usr/bin/env python3
"""Entry point for the hexhost CLI when run as python -m hexhost.cli."""

if __name__ == "__main__":
    from hexhost.cli.main import main

    main()
