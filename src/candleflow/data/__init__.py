"""Bar source management module."""

from candleflow.data.sources import (CSVDataSource, DataSource,
                                     SampleDataSource, resolve_data_source)

__all__ = [
    "DataSource",
    "CSVDataSource",
    "SampleDataSource",
    "resolve_data_source",
]
