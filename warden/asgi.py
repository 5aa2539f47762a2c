"""ASGI entrypoint: uvicorn warden.asgi:app"""

from dotenv import load_dotenv

load_dotenv()

from warden.core.config import get_settings
from warden.core.log import configure_logging
from warden.main import create_app

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

app = create_app(settings)
