"""Command line configuration for the gridpeek viewer."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

DEFAULT_LOG_DIR = os.path.expanduser("~/.gridpeek/logs")


@dataclass
class ViewerConfig:
    csv_path: str
    multi_select: bool = True
    min_column_width: int = 8
    max_column_width: int = 40
    width_sample_size: int = 1000
    log_dir: str = field(default=DEFAULT_LOG_DIR)
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.min_column_width < 1:
            raise ValueError("--min-width must be at least 1")
        if self.max_column_width < self.min_column_width:
            raise ValueError("--max-width must not be smaller than --min-width")
        if self.width_sample_size < 0:
            raise ValueError("--sample-size must be >= 0")
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> ViewerConfig:
        parser = build_parser()
        args = parser.parse_args(argv)
        return cls(
            csv_path=args.csv_path,
            multi_select=not args.single_select,
            min_column_width=args.min_width,
            max_column_width=args.max_width,
            width_sample_size=args.sample_size,
            log_dir=args.log_dir,
            log_level=args.log_level,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridpeek", description="Browse a CSV file with rectangular selection."
    )
    parser.add_argument("csv_path", help="CSV file to open")
    parser.add_argument(
        "--single-select",
        action="store_true",
        help="start with multi-cell selection disabled",
    )
    parser.add_argument("--min-width", type=int, default=8, help="minimum column width")
    parser.add_argument("--max-width", type=int, default=40, help="maximum column width")
    parser.add_argument(
        "--sample-size",
        type=int,
        default=1000,
        help="rows sampled when measuring column widths",
    )
    parser.add_argument("--log-dir", default=DEFAULT_LOG_DIR, help="directory for log files")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, ...)")
    return parser
