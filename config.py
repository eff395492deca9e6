import os
import logging
import tempfile
from dotenv import load_dotenv

load_dotenv()

# Extraction oracle (Gemini). Leave the key empty to run on local heuristics only.
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
ORACLE_TIMEOUT_SECONDS = float(os.getenv("ORACLE_TIMEOUT_SECONDS", "30"))

# Batch processing
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "5"))
BATCH_DELAY_SECONDS = float(os.getenv("BATCH_DELAY_SECONDS", "1.0"))

# Below this many skills the aggressive contextual pass is run as well
AGGRESSIVE_SKILL_THRESHOLD = int(os.getenv("AGGRESSIVE_SKILL_THRESHOLD", "2"))

# Web app
ALLOWED_EXTENSIONS = {'pdf', 'txt', 'docx'}
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", tempfile.gettempdir())
MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50MB
SECRET_KEY = os.getenv("SECRET_KEY", "replace-this-with-a-secure-random-key")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = None) -> None:
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
