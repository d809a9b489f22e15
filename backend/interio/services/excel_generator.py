"""Excel generation service for quotations.

Sheet layout:
- company header and quotation number (rows 1-5)
- customer block (rows 7-10)
- one section per room: line items, room subtotal, installation charges
- summary (subtotal, global discount, installation & handling, GST, final price)
- amount in words and terms
"""

import logging
from typing import Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..config import settings
from ..models import AppSettings, Customer, Quotation, QuotationTotals, Room
from ..utils import ErrorCode, FileManager, raise_error
from .number_words import amount_in_words
from .pricing import PricingCalculator, get_pricing_calculator
from .quotation_format import (
    CUSTOMER_ROW,
    HEADER_START_ROW,
    INR_NUMBER_FORMAT,
    INSTALLATION_COLUMNS,
    ITEM_COLUMNS,
    ROOMS_START_ROW,
    SHEET_TITLE,
    TITLE,
)

logger = logging.getLogger(__name__)

_THIN = Side(style="thin")
THIN_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
ROOM_FILL = PatternFill(start_color="DCE6F1", end_color="DCE6F1", fill_type="solid")
AMOUNT_COL = len(ITEM_COLUMNS)
LABEL_COL = AMOUNT_COL - 2


class ExcelGeneratorService:
    """Service for generating Excel quotations."""

    def __init__(
        self,
        calculator: Optional[PricingCalculator] = None,
        file_manager: Optional[FileManager] = None,
    ):
        """Initialize Excel generator service.

        Args:
            calculator: PricingCalculator; None uses the singleton
            file_manager: FileManager for the export directory
        """
        self.calculator = calculator or get_pricing_calculator()
        self.file_manager = file_manager or FileManager(export_dir=settings.export_dir_path)

    def create_quotation_excel(
        self,
        quotation: Quotation,
        customer: Customer,
        app_settings: AppSettings,
    ) -> str:
        """
        Create Excel file for quotation.

        Args:
            quotation: Quotation with its full room tree
            customer: Quotation's customer
            app_settings: Settings providing terms and conditions

        Returns:
            Path to generated Excel file

        Raises:
            APIError: If generation fails
        """
        totals = self.calculator.calculate(quotation)
        try:
            wb = Workbook()
            ws = wb.active
            ws.title = SHEET_TITLE

            for col_num, (_, width) in enumerate(ITEM_COLUMNS, 1):
                ws.column_dimensions[get_column_letter(col_num)].width = width

            self._write_company_header(ws, quotation)
            self._write_customer_block(ws, customer)

            row = ROOMS_START_ROW
            for room in quotation.rooms:
                row = self._write_room(ws, room, row) + 1

            row = self._write_summary(ws, quotation, totals, row)
            self._write_terms_footer(ws, app_settings.terms_and_conditions, row + 1)

            file_path = self.file_manager.new_export_path(quotation.quotation_number)
            wb.save(str(file_path))
            logger.info(f"Excel file created: {file_path}")
            return str(file_path)

        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Excel generation failed: {e}")
            raise_error(
                ErrorCode.EXPORT_FAILED,
                f"Excel generation failed: {e}",
                status_code=500,
            )

    def _write_company_header(self, ws, quotation: Quotation) -> None:
        """Company details on the left, quotation number and date on the right."""
        row = HEADER_START_ROW
        ws.cell(row=row, column=1, value=settings.company_name).font = Font(bold=True, size=16)
        ws.cell(row=row, column=LABEL_COL, value=TITLE).font = Font(bold=True, size=18)

        ws.cell(row=row + 1, column=1, value=settings.company_address)
        ws.cell(row=row + 2, column=1, value=f"Phone: {settings.company_phone}")
        ws.cell(row=row + 3, column=1, value=f"Email: {settings.company_email}")
        ws.cell(row=row + 4, column=1, value=f"GSTIN: {settings.company_tax_id}")

        ws.cell(row=row + 1, column=LABEL_COL, value="Quotation No:")
        ws.cell(row=row + 1, column=AMOUNT_COL, value=quotation.quotation_number)
        ws.cell(row=row + 2, column=LABEL_COL, value="Date:")
        ws.cell(row=row + 2, column=AMOUNT_COL, value=quotation.created_at.strftime("%d %b %Y"))
        if quotation.title:
            ws.cell(row=row + 3, column=LABEL_COL, value="Project:")
            ws.cell(row=row + 3, column=AMOUNT_COL, value=quotation.title)

    def _write_customer_block(self, ws, customer: Customer) -> None:
        """Bill-to block."""
        ws.cell(row=CUSTOMER_ROW, column=1, value="Bill To:").font = Font(bold=True)
        lines = [customer.name, customer.address, customer.phone, customer.email]
        for offset, line in enumerate([ln for ln in lines if ln], 1):
            ws.cell(row=CUSTOMER_ROW + offset, column=1, value=line)

    def _write_table_header(self, ws, row: int, headers: list) -> None:
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        for col_num, header_text in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col_num, value=header_text)
            cell.fill = HEADER_FILL
            cell.font = header_font
            cell.alignment = header_alignment
            cell.border = THIN_BORDER

    def _write_room(self, ws, room: Room, row: int) -> int:
        """
        Write one room section.

        Returns:
            Last row written
        """
        room_totals = self.calculator.room_totals(room)

        title = ws.cell(row=row, column=1, value=room.display_name)
        title.font = Font(bold=True, size=12)
        for col_num in range(1, AMOUNT_COL + 1):
            ws.cell(row=row, column=col_num).fill = ROOM_FILL
        row += 1

        self._write_table_header(ws, row, [header for header, _ in ITEM_COLUMNS])
        row += 1

        for idx, item in enumerate(room.line_items, 1):
            values = [
                idx,
                item.kind.capitalize(),
                item.name,
                item.description or "",
                item.quantity,
                item.selling_price,
                item.discount_percent,
                self.calculator.line_total(item),
            ]
            for col_num, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col_num, value=value)
                cell.border = THIN_BORDER
                cell.alignment = Alignment(vertical="top", wrap_text=col_num in (3, 4))
                if col_num in (6, 8):
                    cell.number_format = INR_NUMBER_FORMAT
            row += 1

        ws.cell(row=row, column=LABEL_COL, value="Room Total (MRP)").font = Font(bold=True)
        ws.cell(row=row, column=AMOUNT_COL, value=room_totals.selling_price).number_format = INR_NUMBER_FORMAT
        row += 1
        ws.cell(row=row, column=LABEL_COL, value="Room Total (Offer)").font = Font(bold=True)
        ws.cell(row=row, column=AMOUNT_COL, value=room_totals.discounted_price).number_format = INR_NUMBER_FORMAT
        row += 1

        if room.installation_charges:
            row += 1
            self._write_table_header(ws, row, INSTALLATION_COLUMNS)
            row += 1
            for idx, charge in enumerate(room.installation_charges, 1):
                values = [
                    idx,
                    charge.cabinet_type,
                    charge.width_mm,
                    charge.height_mm,
                    round(charge.area_sqft, 2),
                    charge.price_per_sqft,
                    None,
                    charge.amount,
                ]
                for col_num, value in enumerate(values, 1):
                    cell = ws.cell(row=row, column=col_num, value=value)
                    cell.border = THIN_BORDER
                    if col_num in (6, 8):
                        cell.number_format = INR_NUMBER_FORMAT
                row += 1
            ws.cell(row=row, column=LABEL_COL, value="Installation Total").font = Font(bold=True)
            ws.cell(
                row=row, column=AMOUNT_COL, value=room_totals.installation_charges
            ).number_format = INR_NUMBER_FORMAT
            row += 1

        return row

    def _write_summary(
        self, ws, quotation: Quotation, totals: QuotationTotals, row: int
    ) -> int:
        """
        Write the price summary and amount in words.

        Returns:
            Next free row
        """
        lines = [
            ("Subtotal", totals.subtotal),
            (
                f"Global Discount ({quotation.global_discount_percent:g}%)",
                -totals.global_discount_amount,
            ),
            ("Total after Discount", totals.after_global_discount),
            ("Installation & Handling", totals.total_installation_charges),
            (f"GST ({quotation.gst_percent:g}%)", totals.gst_amount),
            ("Final Price", totals.final_price),
        ]
        ws.cell(row=row, column=1, value="Summary").font = Font(bold=True, size=12)
        for label, value in lines:
            label_cell = ws.cell(row=row, column=LABEL_COL, value=label)
            value_cell = ws.cell(row=row, column=AMOUNT_COL, value=value)
            value_cell.number_format = INR_NUMBER_FORMAT
            value_cell.border = THIN_BORDER
            if label == "Final Price":
                label_cell.font = Font(bold=True)
                value_cell.font = Font(bold=True)
            row += 1

        row += 1
        ws.cell(row=row, column=1, value="Amount in words:").font = Font(bold=True)
        ws.cell(row=row, column=3, value=amount_in_words(totals.final_price))
        return row + 2

    def _write_terms_footer(self, ws, terms: str, start_row: int) -> None:
        """Write terms and conditions, one line per row."""
        ws.cell(row=start_row, column=1, value="Terms & Conditions:").font = Font(bold=True)
        for offset, line in enumerate([ln for ln in terms.splitlines() if ln.strip()], 1):
            ws.cell(row=start_row + offset, column=1, value=line.strip())

    def validate_excel_file(self, file_path: str) -> bool:
        """Check that a generated file opens and carries the quotation title."""
        try:
            wb = load_workbook(file_path)
            ws = wb.active
            if ws.cell(row=HEADER_START_ROW, column=LABEL_COL).value != TITLE:
                raise ValueError("Quotation title cell missing")
            logger.info(f"Excel file validated: {file_path}")
            return True

        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Excel validation failed: {e}")
            raise_error(
                ErrorCode.EXPORT_FAILED,
                "Excel validation failed",
                status_code=500,
            )
