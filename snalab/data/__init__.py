"""Input providers: spreadsheet model, CSV uploads and sample datasets."""

from .csv_loader import frame_to_rows, load_csv_rows, read_csv_frame
from .edge_table import EdgeTable, SelectionRange, records_to_rows
from .samples import SampleDataset, get_sample, list_samples, load_sample_rows

__all__ = [
    "EdgeTable",
    "SampleDataset",
    "SelectionRange",
    "frame_to_rows",
    "get_sample",
    "list_samples",
    "load_csv_rows",
    "load_sample_rows",
    "read_csv_frame",
    "records_to_rows",
]
