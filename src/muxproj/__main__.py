"""Module entrypoint for ``python -m muxproj``."""

from .cli.main import run

if __name__ == "__main__":
    run()
