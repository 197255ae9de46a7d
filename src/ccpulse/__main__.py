"""Allow ``python -m ccpulse``."""

from ccpulse.cli import app

if __name__ == "__main__":
    app()
