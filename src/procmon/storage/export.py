"""
Parquet export of replayed archives using Polars.
"""

import logging
from pathlib import Path
from typing import Dict, Literal

from ..models.samples import HistoryCategory
from .reader import ReplayResult

logger = logging.getLogger(__name__)


class ParquetExporter:
    """
    Writes one Parquet file per history category of a replay.
    """

    def __init__(self, compression: Literal["snappy", "gzip", "brotli", "lz4", "zstd"] = "snappy"):
        self.compression = compression

    def export(self, result: ReplayResult, output_dir: Path) -> Dict[HistoryCategory, Path]:
        """
        Export every non-empty category of ``result``.

        Returns:
            Mapping of category to the written file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        written = {}
        for category in HistoryCategory:
            frame = result.to_frame(category)
            if frame.is_empty():
                continue
            path = output_dir / f"{category.value}.parquet"
            try:
                frame.write_parquet(path, compression=self.compression)
            except Exception as e:
                logger.error(f"Failed to save DataFrame to {path}: {e}")
                raise
            logger.debug(f"Saved DataFrame with {len(frame)} rows to {path}")
            written[category] = path
        return written
