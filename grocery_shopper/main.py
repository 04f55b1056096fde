import logging

import uvicorn

from .config import config


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger(__name__).info(
        "Server is running at http://%s:%s", config.HOST, config.PORT
    )
    uvicorn.run("grocery_shopper.app:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
