from smetax.core.tax_rules.classification import EntityClassifier
from smetax.core.tax_rules.vat import VATCalculator
from smetax.core.tax_rules.position import VATPositionCalculator

__all__ = ["EntityClassifier", "VATCalculator", "VATPositionCalculator"]
