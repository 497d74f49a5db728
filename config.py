# config.py
import os

# --- Application Configuration ---
# Read once at import. Each value can be overridden with an environment variable.

SECRET_KEY = os.getenv("AQUASURE_SECRET_KEY", "change-this-secret-key-before-deploying")

# The file path for the SQLite database.
DB_PATH = os.getenv("AQUASURE_DB_PATH", "aquasure.db")

SESSION_TIMEOUT_MINUTES = int(os.getenv("AQUASURE_SESSION_TIMEOUT", "60"))

HOST = os.getenv("AQUASURE_HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))

LOG_LEVEL = os.getenv("AQUASURE_LOG_LEVEL", "INFO").upper()
