from pathlib import Path

CONFIG_DIR = Path.home() / '.config' / 'addonctl'
CONFIG_FILE = CONFIG_DIR / 'config.yaml'
CATALOG_FILE = CONFIG_DIR / 'catalog.yaml'
