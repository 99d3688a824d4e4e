"""Entry point for python -m bumpcheck."""

from .cli import main

if __name__ == "__main__":
    main()
