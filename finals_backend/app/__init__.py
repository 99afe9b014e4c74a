from .config import Settings
from .utils.logger import setup_logger

__version__ = "0.1.0"

settings = Settings()
# Parent of the module-level loggers under finals_backend.app.core
logger = setup_logger("finals_backend")
