"""Entry point: delegates to the CLI app (server and subscription commands)."""

from rich.traceback import install

from src.cli import app
from src.utils.logger import init_logging, shutdown_logging

if __name__ == "__main__":
    try:
        install(show_locals=False, max_frames=5, word_wrap=True)
        init_logging()
        app()
    finally:
        shutdown_logging()
