"""
Entity Classification Engine
Based on Nigeria Tax Act 2025, Chapter 2, Part IX, Section 56

Small Company Definition:
  - Annual turnover ≤ ₦50,000,000
  - Total fixed assets ≤ ₦250,000,000
  - NOT providing professional services

Small companies are exempt from Company Income Tax (CIT) and are not subject
to the Development Levy (Section 59). VAT applies either way.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from smetax.core.errors import InvalidInputError, ValidationResult, get_field, is_number
from smetax.core.formatting import format_naira
from smetax.core.tax_rules.keywords import KeywordTable, PROFESSIONAL_SERVICES_KEYWORDS
from smetax.core.tax_rules.rates import (
    get_cit_rate,
    get_development_levy_rate,
    resolve_year,
)

logger = logging.getLogger(__name__)


class EntityClassification(str, Enum):
    SMALL = "SMALL"
    STANDARD = "STANDARD"


class FailureReason(str, Enum):
    TURNOVER = "turnover"
    ASSETS = "assets"
    BOTH_THRESHOLDS = "both_thresholds"
    PROFESSIONAL_SERVICES = "professional_services"


TURNOVER_THRESHOLD = 50_000_000.0
ASSETS_THRESHOLD = 250_000_000.0


@dataclass(frozen=True)
class ClassificationInput:
    turnover: float
    fixed_assets: float
    is_professional_services: bool
    industry_code: str | None = None


@dataclass
class ClassificationThresholds:
    turnover_threshold: float
    assets_threshold: float
    turnover_met: bool
    assets_met: bool


@dataclass
class TaxImplications:
    cit_rate: float
    dev_levy_rate: float
    vat_applicable: bool = True


@dataclass
class ClassificationResult:
    classification: EntityClassification
    cit_exempt: bool
    dev_levy_applicable: bool
    thresholds: ClassificationThresholds
    tax_implications: TaxImplications
    tax_year: int
    failure_reason: FailureReason | None = None
    reasoning: list[str] = field(default_factory=list)


class EntityClassifier:
    """
    Deterministic SMALL / STANDARD classifier.

    The result depends only on the input and the as-of year used for the
    STANDARD rate lookup. The reasoning trail records every comparison made,
    so a result can be audited without re-running it.
    """

    def __init__(
        self,
        turnover_threshold: float = TURNOVER_THRESHOLD,
        assets_threshold: float = ASSETS_THRESHOLD,
        currency_symbol: str = "₦",
    ):
        self.turnover_threshold = turnover_threshold
        self.assets_threshold = assets_threshold
        self.currency_symbol = currency_symbol

    def _money(self, amount: float) -> str:
        return format_naira(amount, self.currency_symbol)

    def _thresholds(self, data: ClassificationInput) -> ClassificationThresholds:
        return ClassificationThresholds(
            turnover_threshold=self.turnover_threshold,
            assets_threshold=self.assets_threshold,
            turnover_met=data.turnover <= self.turnover_threshold,
            assets_met=data.fixed_assets <= self.assets_threshold,
        )

    def classify(
        self,
        data: ClassificationInput,
        as_of: date | datetime | str | int | None = None,
    ) -> ClassificationResult:
        if data.turnover < 0 or data.fixed_assets < 0:
            raise InvalidInputError("Turnover and fixed assets must be non-negative")

        tax_year = resolve_year(as_of)
        thresholds = self._thresholds(data)
        reasoning: list[str] = []

        if data.is_professional_services:
            reasoning.append("❌ Professional services exclusion")
            reasoning.append(
                "Professional services businesses cannot qualify as SMALL companies per Section 56"
            )
            return self._standard_result(
                thresholds, reasoning, FailureReason.PROFESSIONAL_SERVICES, tax_year
            )

        if thresholds.turnover_met:
            reasoning.append(
                f"✓ Turnover test: {self._money(data.turnover)} ≤ {self._money(self.turnover_threshold)}"
            )
        else:
            reasoning.append(
                f"✗ Turnover test: {self._money(data.turnover)} > {self._money(self.turnover_threshold)}"
            )

        if thresholds.assets_met:
            reasoning.append(
                f"✓ Assets test: {self._money(data.fixed_assets)} ≤ {self._money(self.assets_threshold)}"
            )
        else:
            reasoning.append(
                f"✗ Assets test: {self._money(data.fixed_assets)} > {self._money(self.assets_threshold)}"
            )

        if thresholds.turnover_met and thresholds.assets_met:
            return self._small_result(thresholds, reasoning, tax_year)

        if not thresholds.turnover_met and not thresholds.assets_met:
            failure_reason = FailureReason.BOTH_THRESHOLDS
        elif not thresholds.turnover_met:
            failure_reason = FailureReason.TURNOVER
        else:
            failure_reason = FailureReason.ASSETS

        return self._standard_result(thresholds, reasoning, failure_reason, tax_year)

    def _small_result(
        self,
        thresholds: ClassificationThresholds,
        reasoning: list[str],
        tax_year: int,
    ) -> ClassificationResult:
        reasoning.append("")
        reasoning.append("✅ CLASSIFICATION: SMALL COMPANY")
        reasoning.append("Tax implications:")
        reasoning.append("  • EXEMPT from Company Income Tax (CIT)")
        reasoning.append("  • NOT subject to Development Levy")
        reasoning.append("  • Subject to VAT at applicable rates")

        logger.debug("Classified entity as SMALL for tax year %s", tax_year)

        return ClassificationResult(
            classification=EntityClassification.SMALL,
            cit_exempt=True,
            dev_levy_applicable=False,
            thresholds=thresholds,
            tax_implications=TaxImplications(cit_rate=0.0, dev_levy_rate=0.0),
            tax_year=tax_year,
            reasoning=reasoning,
        )

    def _standard_result(
        self,
        thresholds: ClassificationThresholds,
        reasoning: list[str],
        failure_reason: FailureReason,
        tax_year: int,
    ) -> ClassificationResult:
        cit_rate = get_cit_rate(tax_year)
        dev_levy_rate = get_development_levy_rate(tax_year)

        reasoning.append("")
        reasoning.append("❌ CLASSIFICATION: STANDARD COMPANY")
        reasoning.append("Tax implications:")
        reasoning.append(f"  • Subject to Company Income Tax (CIT) at {cit_rate * 100:g}% ({tax_year})")
        reasoning.append(f"  • Subject to Development Levy at {dev_levy_rate * 100:g}% ({tax_year})")
        reasoning.append("  • Subject to VAT at applicable rates")

        logger.debug(
            "Classified entity as STANDARD for tax year %s (reason=%s)",
            tax_year,
            failure_reason.value,
        )

        return ClassificationResult(
            classification=EntityClassification.STANDARD,
            cit_exempt=False,
            dev_levy_applicable=True,
            thresholds=thresholds,
            tax_implications=TaxImplications(cit_rate=cit_rate, dev_levy_rate=dev_levy_rate),
            tax_year=tax_year,
            failure_reason=failure_reason,
            reasoning=reasoning,
        )

    def validate(self, data: Mapping[str, Any]) -> ValidationResult:
        errors: list[str] = []

        turnover = get_field(data, "turnover")
        if turnover is None:
            errors.append("Annual turnover is required")
        elif not is_number(turnover):
            errors.append("Annual turnover must be a number")
        elif turnover < 0:
            errors.append("Annual turnover cannot be negative")

        fixed_assets = get_field(data, "fixed_assets", "fixedAssets")
        if fixed_assets is None:
            errors.append("Fixed assets value is required")
        elif not is_number(fixed_assets):
            errors.append("Fixed assets value must be a number")
        elif fixed_assets < 0:
            errors.append("Fixed assets value cannot be negative")

        if get_field(data, "is_professional_services", "isProfessionalServices") is None:
            errors.append("Professional services flag is required")

        return ValidationResult.from_errors(errors)


_default_classifier = EntityClassifier()


def classify_entity(
    data: ClassificationInput,
    as_of: date | datetime | str | int | None = None,
) -> ClassificationResult:
    return _default_classifier.classify(data, as_of=as_of)


def validate_classification_input(data: Mapping[str, Any]) -> ValidationResult:
    """Check a partial classification payload; every problem is reported."""
    return _default_classifier.validate(data)


def is_professional_services_business(
    description: str,
    industry_code: str | None = None,
    keywords: KeywordTable = PROFESSIONAL_SERVICES_KEYWORDS,
) -> bool:
    """
    Heuristic fallback when the professional services flag is not given.
    The industry code, when present, is matched against the same table.
    """
    if keywords.matches(description):
        return True
    return industry_code is not None and keywords.matches(industry_code)
