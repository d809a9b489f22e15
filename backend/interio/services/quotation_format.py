"""Layout constants for exported quotations.

Used by the Excel generator.
"""

# Line item table: (header_text, excel_width)
ITEM_COLUMNS = [
    ("#", 5),
    ("Type", 11),
    ("Item", 28),
    ("Description", 34),
    ("Qty", 8),
    ("Unit Price", 14),
    ("Disc. %", 9),
    ("Amount", 16),
]

# Installation charge table, written under the same columns
INSTALLATION_COLUMNS = [
    "#",
    "Cabinet Type",
    "Width (mm)",
    "Height (mm)",
    "Area (sq.ft)",
    "Rate / sq.ft",
    "",
    "Amount",
]

TITLE = "QUOTATION"
SHEET_TITLE = "Quotation"

# Row layout constants
HEADER_START_ROW = 1    # Company header starts at row 1
CUSTOMER_ROW = 7        # Customer block starts at row 7
ROOMS_START_ROW = 12    # First room section

# Indian digit grouping (1,23,45,678.00) for currency cells
INR_NUMBER_FORMAT = (
    '[>=10000000]##\\,##\\,##\\,##0.00;'
    '[>=100000]##\\,##\\,##0.00;'
    '##,##0.00'
)
