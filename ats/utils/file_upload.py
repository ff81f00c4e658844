"""
File Upload Utility - read applicant spreadsheets.

Supported formats:
- CSV (.csv)
- Excel (.xlsx) using pandas + openpyxl

Column headers are matched ignoring case, spaces and punctuation, so both
record keys ("mobileNo") and form-export headers ("Mobile No", "Email Address")
work. Unknown columns are ignored.

Max file size: settings.max_upload_size_mb
"""

import io
import re
from typing import Dict, List, Tuple

import pandas as pd
from fastapi import HTTPException, UploadFile

from ats.core.config import get_settings
from ats.schemas.schemas import ApplicantFields

ALLOWED_EXTENSIONS = {'.csv', '.xlsx'}

# Form-export headers that don't normalise to a record key
EXTRA_HEADER_ALIASES = {
    "timestamp": "submissionTimestamp",
    "emailaddress": "email",
    "fullname": "name",
    "mobilenumber": "mobileNo",
    "phone": "mobileNo",
    "fathermothersname": "fatherMotherName",
    "fathermothersoccupation": "fatherMotherOccupation",
    "institute": "presentInstitute",
    "college": "presentInstitute",
    "course": "areasOfTraining",
    "semester": "presentSemester",
    "sgpa": "lastSemesterSGPA",
    "cgpa": "lastSemesterSGPA",
    "percentage": "percentageIn10Plus2",
}


def normalize_header(header: str) -> str:
    return re.sub(r'[^a-z0-9]', '', str(header).lower())


def _build_header_lookup() -> Dict[str, str]:
    lookup = {}
    for name, field in ApplicantFields.model_fields.items():
        alias = field.alias or name
        lookup[normalize_header(alias)] = alias
    lookup.update(EXTRA_HEADER_ALIASES)
    return lookup


HEADER_LOOKUP = _build_header_lookup()


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Validate and read an uploaded spreadsheet.

    Returns:
        Tuple of (content, extension)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Only Excel (.xlsx) and CSV files are allowed."
        )

    content = await file.read()

    max_mb = get_settings().max_upload_size_mb
    if len(content) > max_mb * 1024 * 1024:
        raise HTTPException(status_code=413, detail=f"File too large. Maximum size is {max_mb}MB.")
    if not content.strip():
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return content, ext


def parse_applicant_rows(content: bytes, ext: str) -> List[dict]:
    """
    Turn spreadsheet bytes into applicant dicts keyed by record field names.
    Blank cells are dropped.
    """
    try:
        if ext == '.csv':
            df = pd.read_csv(io.BytesIO(content), dtype=str)
        else:
            df = pd.read_excel(io.BytesIO(content), dtype=str, engine="openpyxl")
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Could not read spreadsheet: {e}")

    df = df.fillna("")
    columns = {col: HEADER_LOOKUP.get(normalize_header(col)) for col in df.columns}

    rows = []
    for raw in df.to_dict(orient="records"):
        row = {}
        for col, value in raw.items():
            key = columns[col]
            value = str(value).strip()
            if key and value and key not in row:
                row[key] = value
        if "submissionTimestamp" in row:
            parsed = pd.to_datetime(row["submissionTimestamp"], errors="coerce", dayfirst=True)
            if pd.isna(parsed):
                del row["submissionTimestamp"]
            else:
                row["submissionTimestamp"] = parsed.to_pydatetime()
        rows.append(row)
    return rows
