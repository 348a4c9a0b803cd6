"""Allow ``python -m projx``."""

from projx.cli import app

if __name__ == "__main__":
    app()
