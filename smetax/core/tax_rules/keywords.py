"""
Keyword tables used by the description heuristics.

Basic food items are zero-rated (Section 187, Schedule of zero-rated supplies);
professional services businesses cannot be SMALL companies (Section 56).
Both checks are plain case-insensitive substring matches. Tables are values,
so another keyword set can be passed to any helper that takes `keywords=`.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class KeywordTable:
    name: str
    keywords: tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords))

    def match(self, text: str) -> str | None:
        """Return the first keyword contained in `text`, or None."""
        normalized = text.lower().strip()
        for keyword in self.keywords:
            if keyword in normalized:
                return keyword
        return None

    def matches(self, text: str) -> bool:
        return self.match(text) is not None

    def extend(self, *extra: str) -> "KeywordTable":
        return KeywordTable(name=self.name, keywords=self.keywords + extra)


BASIC_ITEM_KEYWORDS = KeywordTable(
    name="basic_food_items",
    keywords=(
        # Cereals
        "bread",
        "rice",
        "maize",
        "wheat",
        "millet",
        "barley",
        "sorghum",
        "oats",
        # Proteins
        "beans",
        "milk",
        "fish",
        "meat",
        "chicken",
        "egg",
        # Cooking
        "cooking oil",
        "palm oil",
        "vegetable oil",
        "salt",
        # Tubers
        "yam",
        "cassava",
        "potato",
        "plantain",
        "garri",
        # Others
        "honey",
        "flour",
    ),
)

PROFESSIONAL_SERVICES_KEYWORDS = KeywordTable(
    name="professional_services",
    keywords=(
        "legal",
        "law",
        "accounting",
        "audit",
        "consulting",
        "architecture",
        "engineering",
        "medical",
        "healthcare",
        "financial advisory",
        "tax advisory",
        "management consulting",
    ),
)
