"""ASGI entrypoint. No business logic; only wiring. Run: uvicorn sweetshop.main:app"""

from dotenv import load_dotenv

load_dotenv()

from sweetshop.application import create_app
from sweetshop.core.config import get_settings
from sweetshop.core.logging_config import configure_logging

settings = get_settings()
configure_logging(settings)

app = create_app(settings)
