"""Allow ``python -m stalesweep``."""

from stalesweep.cli.main import app

if __name__ == "__main__":
    app()
