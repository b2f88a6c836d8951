"""Entry point for ``python -m calcula``."""

from calcula.cli import main

if __name__ == "__main__":
    main()
