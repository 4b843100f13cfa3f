"""
Montage Rows - Compose a list of condition rows.

Each row is processed independently: it allocates its own integral tables
and output buffers, so rows never share mutable state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

import numpy as np

from cellmontage.core.exceptions import MontageError, RowIncompleteError
from cellmontage.core.types import ProcessingConfig, Raster
from cellmontage.processing.pipeline import compose_row

logger = logging.getLogger(__name__)


@dataclass
class MontageRow:
    """One condition: a channel pair and its label."""

    channel1: Raster | None = None
    channel2: Raster | None = None
    label: str = ""

    @property
    def is_complete(self) -> bool:
        return self.channel1 is not None and self.channel2 is not None

    def swapped(self) -> MontageRow:
        """Copy of this row with channel 1 and channel 2 exchanged."""
        return replace(self, channel1=self.channel2, channel2=self.channel1)


def compose_montage_row(
    row: MontageRow,
    config: ProcessingConfig,
    is_first_row: bool = False,
    rng: np.random.Generator | None = None,
) -> Raster:
    """
    Compose a single MontageRow.

    Raises:
        RowIncompleteError: If either channel is missing
    """
    if not row.is_complete:
        missing = "channel1" if row.channel1 is None else "channel2"
        raise RowIncompleteError(f"Row {row.label!r} is missing {missing}")
    return compose_row(row.channel1, row.channel2, config, row.label, is_first_row, rng)


def compose_rows(
    rows: Sequence[MontageRow],
    config: ProcessingConfig,
    rng: np.random.Generator | None = None,
) -> list[Raster | None]:
    """
    Compose every row of a montage.

    Column labels are drawn on the row at index 0 only. Incomplete rows
    and rows whose pipeline fails are skipped and yield None in their
    slot; the remaining rows are still composed.

    Args:
        rows: Rows in display order
        config: Processing settings shared by all rows
        rng: Random source shared across rows (drawn in row order)

    Returns:
        One composed raster per row, or None for skipped rows
    """
    if rng is None:
        rng = np.random.default_rng()

    figures: list[Raster | None] = []
    for index, row in enumerate(rows):
        if not row.is_complete:
            logger.warning("Skipping row %d (%r): missing a channel", index, row.label)
            figures.append(None)
            continue
        try:
            figures.append(compose_montage_row(row, config, is_first_row=index == 0, rng=rng))
        except MontageError as e:
            logger.warning("Skipping row %d (%r): %s", index, row.label, e)
            figures.append(None)

    logger.info("Composed %d of %d rows", sum(f is not None for f in figures), len(rows))
    return figures
