# /app/core/config.py

import os
from dotenv import load_dotenv

load_dotenv()

# The second argument of each lookup is the default for local development.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./school_reports.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Set to "true" to create missing tables on startup (local SQLite setups).
CREATE_TABLES_ON_STARTUP = os.getenv("CREATE_TABLES_ON_STARTUP", "false").lower() == "true"
