import atexit
import logging

from hsportal.app import create_app, shutdown
from hsportal.config import load_config

config = load_config()
logging.basicConfig(
    level=config["LOG_LEVEL"],
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(config)
atexit.register(shutdown, app)
