"""Shared fixtures for gridpeek tests."""

import polars as pl
import pytest

from gridpeek.table_source import TableSource

SAMPLE_CSV = """name,age,city
John Doe,34,New York
Jane Smith,28,Scranton
Bob Johnson,45,Boston
Alice Williams,29,Scranton
Charlie Brown,52,New York
Zoë Ångström,41,Malmö
"""


def build_table(cols: int, rows: int) -> TableSource:
    """Build a table of string columns Col0..ColN with cells like R3C2."""
    data = {f"Col{c}": [f"R{r}C{c}" for r in range(rows)] for c in range(cols)}
    return TableSource(pl.DataFrame(data, schema={name: pl.String for name in data}))


@pytest.fixture
def sample_csv_path(tmp_path) -> str:
    path = tmp_path / "sample.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return str(path)


@pytest.fixture
def table_builder():
    return build_table
