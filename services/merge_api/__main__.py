"""Run the merge API with uvicorn on the configured port.

    python -m services.merge_api
"""

import logging

import uvicorn

from app.config import MergeConfig


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = MergeConfig.from_env()
    uvicorn.run("services.merge_api.main:app", host="0.0.0.0", port=config.port)


if __name__ == "__main__":
    main()
