# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()


class Config:
    # External directory that overrides the bundled corpus
    SCRIPTURES_DATA_DIR = os.getenv('SCRIPTURES_DATA_DIR', '')
    BUNDLED_DATA_DIR = os.getenv('SCRIPTURES_BUNDLED_DIR', os.path.join(BASE_DIR, 'data'))
    ARCHIVE_NAME = os.getenv('SCRIPTURES_ARCHIVE_NAME', 'scriptures.zip')

    DEFAULT_SEARCH_LIMIT = int(os.getenv('DEFAULT_SEARCH_LIMIT', 10))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    PORT = int(os.getenv('PORT', 5001))
