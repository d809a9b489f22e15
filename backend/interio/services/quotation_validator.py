"""Completeness checks run before a quotation can be saved.

Errors block the ``draft -> saved`` transition; warnings are advisory.
The validator only reads its arguments: the quotation tree and the
AppSettings value are supplied by the caller.
"""

import logging
from typing import List, Optional

from ..models.app_settings import AppSettings
from ..models.quotation import Quotation, Room
from ..models.pricing import ValidationIssue, ValidationResult, ValidationWarning
from .pricing import PricingCalculator, get_pricing_calculator
from .service_factory import service_factory

logger = logging.getLogger(__name__)

ACCESSORY_WARNING_MESSAGE = "Please check that the following required accessories are added:"


class QuotationValidator:
    """Evaluates the save checklist for a quotation."""

    def __init__(self, calculator: Optional[PricingCalculator] = None):
        """
        Initialize QuotationValidator.

        Args:
            calculator: PricingCalculator used for room totals; None uses the singleton
        """
        self.calculator = calculator or get_pricing_calculator()

    def validate(self, quotation: Quotation, app_settings: AppSettings) -> ValidationResult:
        """
        Validate a fully loaded quotation.

        Every check runs and all errors are collected, except that a
        quotation without rooms stops after the first error.

        Args:
            quotation: Quotation with rooms, items and charges
            app_settings: Settings providing the required accessory keywords

        Returns:
            ValidationResult with is_valid == (no errors)
        """
        errors: List[ValidationIssue] = []
        warnings: List[ValidationWarning] = []

        if not quotation.rooms:
            errors.append(
                ValidationIssue(
                    type="room_zero_value",
                    message="Quotation must have at least one room.",
                )
            )
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        for room in quotation.rooms:
            errors.extend(self._check_room(room))

        if not quotation.installation_handling:
            errors.append(
                ValidationIssue(
                    type="missing_handling_charge",
                    message="Handling charge must be entered.",
                )
            )

        missing = self.missing_accessories(quotation, app_settings)
        if missing:
            warnings.append(
                ValidationWarning(message=ACCESSORY_WARNING_MESSAGE, accessories=missing)
            )

        result = ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
        logger.info(
            f"Validated quotation {quotation.id}: "
            f"{len(errors)} error(s), {len(warnings)} warning(s)"
        )
        return result

    def _check_room(self, room: Room) -> List[ValidationIssue]:
        name = room.display_name
        issues = []

        if self.calculator.room_totals(room).discounted_price == 0:
            issues.append(self._room_issue("room_zero_value", f'Room "{name}" has a zero value.', room))
        if not room.products:
            issues.append(
                self._room_issue("missing_product", f'Room "{name}" does not have any products.', room)
            )
        if not room.accessories:
            issues.append(
                self._room_issue("missing_accessory", f'Room "{name}" does not have any accessories.', room)
            )
        if not room.installation_charges:
            issues.append(
                self._room_issue(
                    "missing_installation", f'Room "{name}" does not have installation charges.', room
                )
            )
        return issues

    @staticmethod
    def _room_issue(issue_type: str, message: str, room: Room) -> ValidationIssue:
        return ValidationIssue(
            type=issue_type,
            message=message,
            room_id=room.id,
            room_name=room.display_name,
        )

    @staticmethod
    def missing_accessories(quotation: Quotation, app_settings: AppSettings) -> List[str]:
        """
        Required accessory keywords with no matching accessory.

        A keyword matches when it is a substring of any lower-cased
        accessory name in any room.

        Args:
            quotation: Quotation to inspect
            app_settings: Settings with the comma-separated keyword list

        Returns:
            Missing keywords in settings order
        """
        names = [name.lower() for name in quotation.accessory_names]
        return [
            keyword
            for keyword in app_settings.required_accessory_keywords()
            if not any(keyword in name for name in names)
        ]


@service_factory
def get_quotation_validator() -> QuotationValidator:
    """Get QuotationValidator singleton."""
    return QuotationValidator()
