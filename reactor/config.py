"""
Reactor Configuration - All constants and settings.
"""
import os
import sys
from pathlib import Path

# ============================================
# NETWORK ENDPOINTS
# ============================================

CATALOG_URL = os.environ.get('REACTOR_CATALOG_URL', 'http://localhost:8080/projects.json')
FETCH_TIMEOUT = float(os.environ.get('REACTOR_FETCH_TIMEOUT', '10'))  # seconds, single attempt

# ============================================
# PATHS
# ============================================

CACHE_DIR = Path.home() / 'reactor' / 'cache'  # Downloaded audio for the mixer backend

# Logging directory
LOG_DIR = Path.home() / 'reactor' / 'logs'
LOG_FILE = LOG_DIR / 'reactor.log'
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5MB per file
LOG_BACKUP_COUNT = 10

# ============================================
# COMMAND LINE FLAGS
# ============================================

MOCK_MODE = '--mock' in sys.argv or '-m' in sys.argv

# ============================================
# PLAYBACK
# ============================================

DEFAULT_VOLUME = 0.8
VOLUME_STEP = 0.1

# Advance to the next track when the active one finishes
AUTO_ADVANCE = os.environ.get('REACTOR_AUTO_ADVANCE', '1') != '0'

# Rating scale used by the catalog
RATING_MIN = 0.0
RATING_MAX = 5.0

# ============================================
# MIXER BACKEND
# ============================================

MIXER_FREQUENCY = 44100
MIXER_POLL_INTERVAL = 0.25  # seconds between end-of-track checks
