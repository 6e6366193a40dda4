# Test configuration
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).parent.parent

# Add repo root to path so tests can import modules
sys.path.insert(0, str(REPO_ROOT))

# Deterministic settings for every test module, set before src.main is imported
os.environ["OFFICIAL_EMAIL"] = "test@example.com"
os.environ["OPENROUTER_API_KEY"] = "test-key"
os.environ["LOG_JSON"] = "false"

from src.config import get_settings  # noqa: E402

get_settings.cache_clear()
