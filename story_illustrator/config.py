import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Config:
    # Only used to seed the key store when nothing has been saved yet
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

    TEXT_MODEL_NAME = os.getenv("TEXT_MODEL_NAME", "gemini-2.5-flash")
    IMAGE_MODEL_NAME = os.getenv("IMAGE_MODEL_NAME", "gemini-2.5-flash-image-preview")

    API_KEY_FILE = Path(os.getenv("API_KEY_FILE", str(Path.home() / ".story_illustrator" / "gemini_api_key")))

    BASE_OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "output"))

# Ensure the download directory exists
def setup_directories(base_path: Path):
    base_path.mkdir(parents=True, exist_ok=True)
