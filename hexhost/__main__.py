"""Entry point for ``python -m hexhost``."""

from hexhost.cli.main import main

if __name__ == "__main__":
    main()
