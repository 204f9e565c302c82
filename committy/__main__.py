"""Allow running committy as ``python -m committy``."""

from committy.cli import run

if __name__ == "__main__":
    run()
