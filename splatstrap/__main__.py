"""Allow ``python -m splatstrap``."""

from .cli_app import app

if __name__ == "__main__":
    app()
