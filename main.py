"""Run the parts catalog API.

Usage:
    python main.py
    # or
    uvicorn parts_catalog.api:create_app --factory --reload --port 5000
"""

import uvicorn

from parts_catalog.api import create_app
from parts_catalog.config import get_config


if __name__ == "__main__":
    config = get_config()
    uvicorn.run(create_app(config), host=config.api.host, port=config.api.port)
