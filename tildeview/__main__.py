"""Module entrypoint for ``python -m tildeview``."""

from .cli import main


if __name__ == "__main__":
    main()
