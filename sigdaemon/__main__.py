# sigdaemon/__main__.py
"""Entry point for `python -m sigdaemon`."""

from sigdaemon.cli import app

if __name__ == "__main__":
    app()
