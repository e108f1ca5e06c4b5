"""Rules-engine settings read from environment variables."""

import os

LOG_LEVEL: str = os.environ.get('CATAN_LOG_LEVEL', 'INFO').upper()
VICTORY_POINTS_TO_WIN: int = int(os.environ.get('CATAN_VICTORY_POINTS', '10'))
