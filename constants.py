"""
Shared constants for Query Playground.

Single source of truth for static values used across layers.
"""

# Non-ISO timestamp layouts recognised when deriving sort keys from text.
# ISO-8601 ("2024-01-31", "2024-01-31 09:30:00", "2024-01-31T09:30") is
# always tried first via datetime.fromisoformat.
TIMESTAMP_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
]

# Exported result sheets are formatted as an Excel table with this style
EXPORT_TABLE_STYLE = "TableStyleMedium2"

# Column width bounds (characters) when sizing exported columns to content
EXPORT_MIN_COLUMN_WIDTH = 8
EXPORT_MAX_COLUMN_WIDTH = 60

# Workbook formats openpyxl can read and write
WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")

# Media type for workbook downloads
WORKBOOK_MEDIA_TYPE = (
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
)

# Uploads are copied in chunks of this size until the byte cap is passed
UPLOAD_CHUNK_BYTES = 1024 * 1024
