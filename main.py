#!/usr/bin/env python3
"""
Quiz Trainer - Main Entry Point

This script runs the interactive quiz trainer. Settings are read from
config.json in the current directory when it exists.

Usage:
    python main.py

Configuration:
    1. Edit config.json to choose the quiz file or the SQL database
    2. Or set the QUIZ_STORAGE, QUIZ_FILE and QUIZ_DATABASE_URL environment variables

Environment Variables:
    QUIZ_STORAGE: "json" or "sql" (overrides config.json)
    QUIZ_FILE: Path of the JSON quiz file (overrides config.json)
    QUIZ_DATABASE_URL: SQLAlchemy URL for the sql storage (overrides config.json)
"""

import asyncio
import sys
import json
import logging
from pathlib import Path

CONFIG_PATH = Path("config.json")


def load_config():
    """Load configuration from config.json file."""
    if not CONFIG_PATH.exists():
        print("Warning: config.json not found, using default settings.", file=sys.stderr)
        return {}

    try:
        with open(CONFIG_PATH, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in config.json: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error loading config.json: {e}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(config, dict):
        print("Error: config.json must contain a JSON object", file=sys.stderr)
        sys.exit(1)
    return config


def setup_logging_from_config(config):
    """Set up logging based on configuration."""
    log_config = config.get('logging', {})
    log_level = getattr(logging, str(log_config.get('level', 'WARNING')).upper(), logging.WARNING)
    log_directory = Path(log_config.get('log_directory', './logs/'))

    log_directory.mkdir(parents=True, exist_ok=True)

    # Console handler stays quiet so log lines do not interleave with the REPL
    console_handler = logging.StreamHandler()
    console_handler.setLevel(max(log_level, logging.WARNING))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            console_handler,
            logging.FileHandler(log_directory / "quiz.log", encoding='utf-8')
        ]
    )
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)


async def run_with_config():
    """Run the quiz trainer with configuration."""
    config = load_config()

    setup_logging_from_config(config)

    from quiztrainer.cli import run_cli
    return await run_cli(config)


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(run_with_config()))
    except KeyboardInterrupt:
        print("\nBye!")
    except Exception as e:
        logging.getLogger(__name__).exception("Quiz trainer crashed")
        print(f"Failed to run quiz trainer: {e}", file=sys.stderr)
        sys.exit(1)
