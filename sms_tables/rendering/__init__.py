"""Rendering: cell isolation, CSV export and the Streamlit bridge."""

from .bridge import render_table
from .cells import CellDiagnostics, CellFault, RenderedCell, render_cell, to_label
from .export import build_csv, export_filename

__all__ = [
    "render_table",
    "render_cell",
    "to_label",
    "CellDiagnostics",
    "CellFault",
    "RenderedCell",
    "build_csv",
    "export_filename",
]
