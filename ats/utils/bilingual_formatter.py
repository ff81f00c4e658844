"""
Bilingual (Hindi / English) formatting helpers for applicant data.

All functions are total: any input is coerced with str(), nothing raises.
"""

from typing import Any, Mapping, Optional

GENDER_LABELS = {
    "female": "महिला / Female",
    "male": "पुरुष / Male",
    "other": "अन्य / Other",
    "others": "अन्य / Other",
}

# SC/ST keep the leading space the printed forms have always used.
CATEGORY_LABELS = {
    "GEN": "सामान्य / General",
    "GENERAL": "सामान्य / General",
    "OBC": "अन्य पिछड़ा वर्ग / OBC",
    "SC": " अनुसूचित जाति / SC",
    "ST": " अनुसूचित जनजाति / ST",
}


def format_age(value: Any) -> str:
    """Append the bilingual suffix: 25 -> '25 वर्ष / years'."""
    if value is None:
        return ""
    numeric = str(value).strip()
    if not numeric:
        return ""
    return f"{numeric} वर्ष / years"


def format_gender(value: Any) -> str:
    if not value:
        return ""
    key = str(value).strip().lower()
    return GENDER_LABELS.get(key, str(value))


def format_category(value: Any) -> str:
    if not value:
        return ""
    key = str(value).strip().upper()
    return CATEGORY_LABELS.get(key, str(value))


def format_applicant_data(record: Optional[Mapping[str, Any]]) -> dict:
    """
    Return a shallow copy of record with age, gender and category replaced
    by their bilingual display strings. The input is never mutated.
    """
    record = record or {}
    formatted = dict(record)

    if record.get("age") is not None:
        formatted["age"] = format_age(record["age"])
    if record.get("gender"):
        formatted["gender"] = format_gender(record["gender"])
    if record.get("category"):
        formatted["category"] = format_category(record["category"])

    return formatted
