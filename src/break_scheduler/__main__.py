"""Allow running as ``python -m break_scheduler``."""

from break_scheduler.cli.main import app

if __name__ == "__main__":
    app()
