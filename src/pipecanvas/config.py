import os
from dotenv import load_dotenv

load_dotenv()

API_URL = os.getenv("PIPECANVAS_API_URL", "http://127.0.0.1:8000")
TIMEOUT = float(os.getenv("PIPECANVAS_TIMEOUT", "10.0"))

# comma-separated, or "*" for any origin
CORS_ORIGINS = os.getenv("PIPECANVAS_CORS_ORIGINS", "*").split(",")

LOG_LEVEL = os.getenv("PIPECANVAS_LOG_LEVEL", "WARNING").upper()
