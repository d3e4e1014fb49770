"""Filesystem adapter configuration, read from the environment."""

import os

APP_NAME = 'wordbook'

# Explicit wordbook path; when set it is the only read source and the write target
WORDBOOK_FILE = os.getenv('WORDBOOK_FILE')
WORDBOOK_FILE_NAME = os.getenv('WORDBOOK_FILE_NAME', 'vocabulary.xml')
# Overrides the per-user application data directory
WORDBOOK_DATA_DIR = os.getenv('WORDBOOK_DATA_DIR')
WORDBOOK_SETTINGS_FILE = os.getenv('WORDBOOK_SETTINGS_FILE')
