"""Configuration management for the Stapler document service."""
import os
import logging
import tempfile
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Model Configuration
FORMAT_MODEL = os.getenv("FORMAT_MODEL", "llama-3.3-70b-versatile")
FORMAT_TEMPERATURE = 0.5
FORMAT_MAX_TOKENS = 2000
MAX_FORMAT_INPUT_TOKENS = int(os.getenv("MAX_FORMAT_INPUT_TOKENS", "6000"))

# Conversion Configuration
CONVERT_WORK_DIR = os.getenv(
    "CONVERT_WORK_DIR",
    os.path.join(tempfile.gettempdir(), "document-converter")
)
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
SUPPORTED_EXTENSIONS = ["doc", "docx", "txt", "rtf", "html", "jpg", "jpeg", "png"]

# Page Geometry (letter size, points)
PAGE_WIDTH = 612
PAGE_HEIGHT = 792
PAGE_MARGIN = 50
FONT_SIZE = 12
TITLE_FONT_SIZE = 18
FOOTER_FONT_SIZE = 10
LINE_HEIGHT_FACTOR = 1.5
IMAGE_MARGIN = 50
PHOTO_MARGIN = 36  # 0.5 inch

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
