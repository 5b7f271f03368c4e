import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()

# Charge fichier YAML
CONFIG_PATH = os.getenv("CONFIG_PATH", str(Path(__file__).with_name("config.yml")))
cfg = {}
if os.path.exists(CONFIG_PATH):
    with open(CONFIG_PATH, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

# Secrets et connexions
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
DB_PATH = os.getenv("DB_PATH", "sqlite+aiosqlite:///db.sqlite3")

# Serveur
HOST = cfg.get("host", "0.0.0.0")
APP_PORT = int(cfg.get("port", 2237))
LOG_LEVEL = str(cfg.get("log_level", "INFO")).upper()

# Pool SQL
POOL_SIZE = int(cfg.get("pool_size", 100))
POOL_TIMEOUT = float(cfg.get("pool_timeout", 30))

# Authkeys : None = jamais expirées
AUTHKEY_TTL_DAYS = cfg.get("authkey_ttl_days")
AUTHKEY_PURGE_CRON = cfg.get("authkey_purge_cron", "15 3 * * *")
