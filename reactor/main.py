#!/usr/bin/env python3
"""
Reactor - Console player for the project catalog

Usage:
    python -m reactor          # Fetch REACTOR_CATALOG_URL, play through pygame
    python -m reactor --mock   # Built-in catalog, silent audio (UI testing)
"""
import os
import sys
import logging
import platform
import threading
from logging.handlers import RotatingFileHandler

from .config import (
    CATALOG_URL, MOCK_MODE, FETCH_TIMEOUT,
    LOG_DIR, LOG_FILE, LOG_MAX_BYTES, LOG_BACKUP_COUNT,
)
from .models import AppSnapshot
from .api import CatalogClient, NullCatalogClient, NullAudioResource, MixerAudioResource
from .app import ReactorApp

HELP = """Controls:
   n        Next track
   p        Previous track
   t        Play/Pause (empty line works too)
   + / -    Volume up/down
   v 0.5    Set volume
   /text    Filter by title or creator (/ alone clears)
   3        Select row 3 of the list
   r        Reload catalog
   q        Quit
"""


def setup_logging():
    """Configure logging with a stderr console handler and a rotating file handler."""
    level_name = os.environ.get('REACTOR_LOG_LEVEL', 'WARNING').upper()
    level = getattr(logging, level_name, logging.WARNING)

    console_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # stdout belongs to the console UI
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(console_formatter)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(console)

    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        root.addHandler(file_handler)
        root.info(f'Logging to: {LOG_FILE}')
    except (OSError, PermissionError) as e:
        root.warning(f'Could not create log file: {e}')

    # Quiet down noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)


def log_system_info(logger: logging.Logger):
    """Log system information at startup."""
    logger.info('=' * 50)
    logger.info('REACTOR STARTUP')
    logger.info('=' * 50)
    logger.info(f'Python: {sys.version.split()[0]}')
    logger.info(f'Platform: {platform.system()} {platform.release()}')
    logger.info('=' * 50)


def render(snapshot: AppSnapshot) -> str:
    """Text rendering of the app state."""
    if snapshot.loader_status == 'loading' and snapshot.session is None:
        return 'Loading catalog...'
    if snapshot.loader_status == 'error':
        return f'Catalog unavailable: {snapshot.loader_error}'

    s = snapshot.session
    if s is None:
        return 'No catalog'
    if len(s.catalog) == 0:
        return 'No playable projects'

    lines = []
    active_row = s.active_row
    if s.filter_text:
        lines.append(f'Filter: "{s.filter_text}" ({len(s.filtered_view)}/{len(s.catalog)})')
    for row, track in enumerate(s.filtered_view.tracks):
        marker = '>' if row == active_row else ' '
        lines.append(
            f'{marker} {row:>3}  {track.title} - {track.creator_name}'
            f'  [{track.like_count} likes, {track.rating:.1f}/5]'
        )

    track = s.active_track
    status = 'loading' if s.is_loading else s.play_state
    lines.append('')
    lines.append(f'Now: {track.title} - {track.creator_name} ({status}, vol {round(s.volume * 100)}%)')
    if s.last_error:
        lines.append(f'Error: {s.last_error}')
    return '\n'.join(lines)


def handle_command(app: ReactorApp, line: str) -> bool:
    """Apply one console command. Returns False to quit."""
    command = line.strip()
    if command in ('q', 'quit', 'exit'):
        return False
    session = app.session
    if session is None:
        return True

    if command in ('', 't'):
        session.toggle_play()
    elif command == 'n':
        session.next()
    elif command == 'p':
        session.previous()
    elif command == '+':
        session.step_volume(1)
    elif command == '-':
        session.step_volume(-1)
    elif command.startswith('v '):
        try:
            session.set_volume(float(command[2:]))
        except ValueError:
            print(f'Not a volume: {command[2:]}')
    elif command.startswith('/'):
        session.set_filter(command[1:])
    elif command.isdigit():
        session.select_filtered(int(command))
    else:
        print(HELP)
    return True


def main():
    """Entry point for the Reactor console."""
    setup_logging()
    logger = logging.getLogger(__name__)
    log_system_info(logger)

    if MOCK_MODE:
        logger.info('Mode: MOCK (UI testing)')
        app = ReactorApp(NullCatalogClient(), NullAudioResource)
    else:
        logger.info(f'Catalog: {CATALOG_URL}')
        app = ReactorApp(CatalogClient(CATALOG_URL), MixerAudioResource)

    settled = threading.Event()
    app.on_change = settled.set

    print(HELP)
    try:
        app.start()
        settled.wait(FETCH_TIMEOUT + 1)
        print(render(app.snapshot()))
        while True:
            try:
                line = input('> ')
            except EOFError:
                break
            if line.strip() == 'r':
                settled.clear()
                app.reload()
                settled.wait(FETCH_TIMEOUT + 1)
            elif not handle_command(app, line):
                break
            print(render(app.snapshot()))
    except KeyboardInterrupt:
        logger.info('Interrupted, shutting down...')
    finally:
        app.stop()


if __name__ == '__main__':
    main()
