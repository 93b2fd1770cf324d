"""CSV export package."""

from guidetrack.services.export.csv_export import (
    build_combined_csv,
    build_expenses_csv,
    build_tours_csv,
    export_filename,
    write_export,
)

__all__ = [
    "build_combined_csv",
    "build_expenses_csv",
    "build_tours_csv",
    "export_filename",
    "write_export",
]
