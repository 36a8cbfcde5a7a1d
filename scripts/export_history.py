"""Export every recorded time in a roster file to Parquet or CSV."""

from __future__ import annotations

import asyncio
from pathlib import Path

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig

from swimtime.records.bests import bests_consistent
from swimtime.records.reports import times_frame
from swimtime.store.memory import InMemorySwimmerStore
from swimtime.utils.fileio import write_csv, write_parquet
from swimtime.utils.logging import logger, setup_logging


@hydra.main(config_path="../configs", config_name="export", version_base=None)
def main(cfg: DictConfig) -> None:
    setup_logging(level=cfg.logging.level)

    store = InMemorySwimmerStore.from_yaml(Path(to_absolute_path(cfg.roster)))
    swimmers = asyncio.run(store.list_swimmers())
    for swimmer in swimmers:
        if not bests_consistent(swimmer):
            logger.warning("Cached lap bests for {} do not match their history", swimmer.name)

    df = times_frame(swimmers)
    out_path = Path(to_absolute_path(cfg.output))
    if cfg.output_format == "csv":
        write_csv(df, out_path)
    else:
        write_parquet(df, out_path)
    logger.info("Exported {} records for {} swimmers to {}", len(df), len(swimmers), out_path)


if __name__ == "__main__":
    main()
