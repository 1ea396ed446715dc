import os

# load envs
from dotenv import load_dotenv
load_dotenv()


PORT = int(os.getenv("PORT", 5000))
HOST = os.getenv("HOST", None)

# Longer edge cap for images fed to corner detection
MAX_DIMENSION = int(os.getenv("MAX_DIMENSION", 900))

MEGABYTE = (2 ** 10) ** 2
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH_MB", 50)) * MEGABYTE
