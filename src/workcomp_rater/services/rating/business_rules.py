"""Business rule validation run before rating.

Rating is only attempted for submissions that pass ``validate_rating_data``.
Errors block rating; warnings and suggestions are informational.
"""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from beartype import beartype

from ...models.business import BusinessInfo, LossRecord, PayrollLine, PremiumModifiers
from ...models.rating import ValidationReport
from .experience_mod import MAX_EXPERIENCE_MOD, MIN_EXPERIENCE_MOD
from .rate_tables import RateTable
from .schedule_credit import MAX_SCHEDULE_CREDIT

MIN_AVERAGE_PAYROLL = 20_000.0
MAX_AVERAGE_PAYROLL = 200_000.0
GOVERNING_CLASS_MIN_EMPLOYEES = 3
LOSS_STATUSES = ("open", "closed")


@beartype
def parse_loss_date(value: str) -> date | None:
    """Parse an ISO-8601 loss date or timestamp; None when malformed."""
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


@beartype
class BusinessRuleViolation:
    """Represents a business rule violation."""

    def __init__(
        self,
        rule_id: str,
        severity: str,  # "error", "warning", "suggestion"
        message: str,
        field: str | None = None,
    ):
        """Initialize business rule violation.

        Args:
            rule_id: Unique identifier for the rule
            severity: Severity level of the violation
            message: Human-readable description
            field: Field that caused the violation
        """
        self.rule_id = rule_id
        self.severity = severity
        self.message = message
        self.field = field

    def to_message(self) -> str:
        """Field-qualified message, e.g. ``payroll_lines[0].annual_payroll: ...``."""
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "rule_id": self.rule_id,
            "severity": self.severity,
            "message": self.message,
            "field": self.field,
        }


@beartype
def build_report(violations: Sequence[BusinessRuleViolation]) -> ValidationReport:
    """Group violations by severity into a ValidationReport."""
    return ValidationReport(
        errors=[v.to_message() for v in violations if v.severity == "error"],
        warnings=[v.to_message() for v in violations if v.severity == "warning"],
        suggestions=[v.to_message() for v in violations if v.severity == "suggestion"],
    )


def _average_payroll(line: PayrollLine) -> float | None:
    if line.employee_count <= 0:
        return None
    return line.annual_payroll / line.employee_count


@beartype
class RatingValidator:
    """Field-level validation of a rating submission."""

    @beartype
    def validate_rating_data(self, business: BusinessInfo) -> ValidationReport:
        """Validate payroll, loss history and modifiers.

        Args:
            business: Submitted business data

        Returns:
            ValidationReport; ``is_valid`` is False when any error was found
        """
        violations: list[BusinessRuleViolation] = []
        violations.extend(self._validate_payroll(business.payroll_lines))
        violations.extend(self._validate_loss_history(business.loss_history))
        if business.modifiers is not None:
            violations.extend(self._validate_modifiers(business.modifiers))
        return build_report(violations)

    @beartype
    def _validate_payroll(
        self, payroll_lines: Sequence[PayrollLine]
    ) -> list[BusinessRuleViolation]:
        if not payroll_lines:
            return [
                BusinessRuleViolation(
                    rule_id="PAYROLL_REQUIRED",
                    severity="error",
                    message="At least one payroll classification is required",
                    field="payroll_lines",
                )
            ]

        violations = []
        for index, line in enumerate(payroll_lines):
            number = index + 1
            field = f"payroll_lines[{index}]"

            if not line.state_code or not line.class_code:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="PAYROLL_INCOMPLETE",
                        severity="error",
                        message=f"Payroll classification {number} is missing required information",
                        field=field,
                    )
                )

            if line.annual_payroll <= 0:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="PAYROLL_AMOUNT",
                        severity="error",
                        message=f"Invalid payroll amount for classification {number}",
                        field=f"{field}.annual_payroll",
                    )
                )

            if line.employee_count <= 0:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="EMPLOYEE_COUNT",
                        severity="error",
                        message=f"Invalid employee count for classification {number}",
                        field=f"{field}.employee_count",
                    )
                )

            average = _average_payroll(line)
            if average is not None and not (
                MIN_AVERAGE_PAYROLL <= average <= MAX_AVERAGE_PAYROLL
            ):
                violations.append(
                    BusinessRuleViolation(
                        rule_id="AVERAGE_PAYROLL",
                        severity="warning",
                        message=(
                            f"Average payroll of {average:.2f} for class "
                            f"{line.class_code} seems unusual"
                        ),
                        field=field,
                    )
                )

        return violations

    @beartype
    def _validate_loss_history(
        self, losses: Sequence[LossRecord]
    ) -> list[BusinessRuleViolation]:
        if not losses:
            return [
                BusinessRuleViolation(
                    rule_id="LOSS_HISTORY_EMPTY",
                    severity="warning",
                    message="No loss history provided",
                    field="loss_history",
                )
            ]

        violations = []
        for index, loss in enumerate(losses):
            number = index + 1
            field = f"loss_history[{index}]"

            if parse_loss_date(loss.loss_date) is None:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="LOSS_DATE",
                        severity="error",
                        message=f"Invalid date for loss {number}",
                        field=f"{field}.loss_date",
                    )
                )

            if loss.amount <= 0:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="LOSS_AMOUNT",
                        severity="error",
                        message=f"Invalid amount for loss {number}",
                        field=f"{field}.amount",
                    )
                )

            if not loss.claim_number:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="CLAIM_NUMBER",
                        severity="warning",
                        message=f"Missing claim number for loss {number}",
                        field=f"{field}.claim_number",
                    )
                )

            if loss.status not in LOSS_STATUSES:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="LOSS_STATUS",
                        severity="error",
                        message=f"Invalid status for loss {number}",
                        field=f"{field}.status",
                    )
                )

        return violations

    @beartype
    def _validate_modifiers(
        self, modifiers: PremiumModifiers
    ) -> list[BusinessRuleViolation]:
        violations = []
        if not MIN_EXPERIENCE_MOD <= modifiers.experience_mod <= MAX_EXPERIENCE_MOD:
            violations.append(
                BusinessRuleViolation(
                    rule_id="EXPERIENCE_MOD_RANGE",
                    severity="error",
                    message="Experience mod must be between 0.75 and 2.00",
                    field="modifiers.experience_mod",
                )
            )
        if abs(modifiers.schedule_credit) > MAX_SCHEDULE_CREDIT:
            violations.append(
                BusinessRuleViolation(
                    rule_id="SCHEDULE_CREDIT_RANGE",
                    severity="error",
                    message="Schedule credit/debit cannot exceed 25%",
                    field="modifiers.schedule_credit",
                )
            )
        return violations

    @beartype
    async def validate_payroll_classifications(
        self,
        payroll_lines: Sequence[PayrollLine],
        rate_table: RateTable,
        effective_date: date,
    ) -> ValidationReport:
        """Check each class code against the rate table.

        Unknown class codes are errors; small employee counts in a governing
        class and unusual average payroll produce suggestions.
        """
        violations: list[BusinessRuleViolation] = []
        for index, line in enumerate(payroll_lines):
            field = f"payroll_lines[{index}].class_code"
            lookup = await rate_table.lookup(
                line.state_code, line.class_code, effective_date
            )
            if lookup.defaulted:
                violations.append(
                    BusinessRuleViolation(
                        rule_id="CLASS_CODE_UNKNOWN",
                        severity="error",
                        message=f"Invalid class code {line.class_code} for state {line.state_code}",
                        field=field,
                    )
                )
                continue

            if (
                lookup.rate.governing_class
                and line.employee_count < GOVERNING_CLASS_MIN_EMPLOYEES
            ):
                violations.append(
                    BusinessRuleViolation(
                        rule_id="STANDARD_EXCEPTION",
                        severity="suggestion",
                        message=(
                            "Consider using standard exception codes for small "
                            f"employee counts in class {line.class_code}"
                        ),
                        field=field,
                    )
                )

            average = _average_payroll(line)
            if average is not None and not (
                MIN_AVERAGE_PAYROLL <= average <= MAX_AVERAGE_PAYROLL
            ):
                violations.append(
                    BusinessRuleViolation(
                        rule_id="AVERAGE_PAYROLL",
                        severity="suggestion",
                        message=(
                            f"Average payroll of {average:.2f} for class "
                            f"{line.class_code} seems unusual"
                        ),
                        field=field,
                    )
                )

        return build_report(violations)
