"""Tests for the Hindi/English display formatting of applicant fields."""

import pytest

from ats.utils.bilingual_formatter import (
    format_age, format_applicant_data, format_category, format_gender
)


@pytest.mark.parametrize("value, expected", [
    (25, "25 वर्ष / years"),
    ("19", "19 वर्ष / years"),
    (" 30 ", "30 वर्ष / years"),
    (0, "0 वर्ष / years"),
    (None, ""),
    ("", ""),
])
def test_format_age(value, expected):
    assert format_age(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("female", "महिला / Female"),
    ("MALE", "पुरुष / Male"),
    ("Others", "अन्य / Other"),
    ("non-binary", "non-binary"),
    ("", ""),
    (None, ""),
])
def test_format_gender(value, expected):
    assert format_gender(value) == expected


@pytest.mark.parametrize("value, expected", [
    ("gen", "सामान्य / General"),
    ("GENERAL", "सामान्य / General"),
    ("obc", "अन्य पिछड़ा वर्ग / OBC"),
    ("EWS", "EWS"),
    (None, ""),
])
def test_format_category(value, expected):
    assert format_category(value) == expected


def test_sc_st_keep_leading_space():
    assert format_category("SC") == " अनुसूचित जाति / SC"
    assert format_category("st") == " अनुसूचित जनजाति / ST"


def test_format_applicant_data_only_touches_display_fields():
    record = {"name": "Riya", "age": 21, "gender": "female", "category": "SC", "cpf": "123"}
    formatted = format_applicant_data(record)

    assert formatted == {
        "name": "Riya",
        "age": "21 वर्ष / years",
        "gender": "महिला / Female",
        "category": " अनुसूचित जाति / SC",
        "cpf": "123",
    }
    # input untouched
    assert record["age"] == 21
    assert record["gender"] == "female"


def test_format_applicant_data_handles_missing_record():
    assert format_applicant_data(None) == {}
    assert format_applicant_data({"age": None}) == {"age": None}
