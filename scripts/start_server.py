"""Run the FastAPI application."""

from __future__ import annotations

from pathlib import Path

import hydra
import uvicorn
from hydra.utils import to_absolute_path
from omegaconf import DictConfig

from swimtime.runtime.session import SessionConfig
from swimtime.serve.api import ServeConfig, create_app
from swimtime.utils.logging import logger, setup_logging


@hydra.main(config_path="../configs", config_name="serve", version_base=None)
def main(cfg: DictConfig) -> None:
    log_file = Path(to_absolute_path(cfg.logging.file)) if cfg.logging.get("file") else None
    setup_logging(log_file, level=cfg.logging.level)

    serve_cfg = ServeConfig(**cfg.serve)
    if serve_cfg.seed_file:
        serve_cfg.seed_file = to_absolute_path(serve_cfg.seed_file)

    app = create_app(serve_cfg, session_config=SessionConfig(**cfg.session))
    logger.info("Starting timing server on {}:{}", cfg.host, cfg.port)
    uvicorn.run(app, host=cfg.host, port=int(cfg.port), reload=False, log_config=None)


if __name__ == "__main__":
    main()
