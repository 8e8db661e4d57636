"""
Turns registry CSV rows into deduplicated company records.

Each input row carries the company columns plus, optionally, one officer.
A company spread over several rows becomes a single CompanyRecord whose
officer list follows the row order.
"""

import logging
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from models.main_models import CompanyRecord, NormalizationResult, Officer

logger = logging.getLogger(__name__)

COMPANY_NUMBER = "Company Number"
COMPANY_NAME = "Company Name"
COMPANY_STATUS = "Company Status"
OFFICER_NAME = "Officer Name"

# Officer field -> CSV column
OFFICER_COLUMNS = {
    "name": OFFICER_NAME,
    "role": "Officer Role",
    "occupation": "Occupation",
    "appointed_on": "Appointed On",
    "nationality": "Nationality",
    "country_of_residence": "Country of Residence",
}

def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip()

def build_officer(row: Mapping[str, str]) -> Officer:
    """
    Builds an Officer from the officer columns of a row.
    """
    return Officer(**{field: _clean(row.get(column)) for field, column in OFFICER_COLUMNS.items()})

def normalize_rows(rows: Iterable[Mapping[str, str]]) -> NormalizationResult:
    """
    Groups rows by company number, preserving first-seen order.

    The name and status of the first row for a number win; later rows only
    contribute officers. Rows without a company number are skipped and
    counted.
    """
    companies: Dict[str, CompanyRecord] = {}
    rows_read = 0
    skipped = 0

    for row in rows:
        rows_read += 1
        company_number = _clean(row.get(COMPANY_NUMBER))
        if not company_number:
            skipped += 1
            logger.warning("Skipping row %d without '%s'", rows_read, COMPANY_NUMBER)
            continue

        company = companies.get(company_number)
        if company is None:
            company = CompanyRecord(
                company_number=company_number,
                company_name=_clean(row.get(COMPANY_NAME)),
                company_status=_clean(row.get(COMPANY_STATUS)),
            )
            companies[company_number] = company

        if _clean(row.get(OFFICER_NAME)):
            company.officers.append(build_officer(row))

    return NormalizationResult(
        companies=list(companies.values()),
        rows_read=rows_read,
        skipped_rows=skipped,
    )

def read_companies_csv(path: str) -> NormalizationResult:
    """
    Reads a registry CSV file and normalizes its rows.

    Every column is read as text and empty cells stay empty strings.

    Raises:
        OSError: If the file cannot be opened or read.
        ValueError: If the file is empty or cannot be parsed as CSV.
    """
    # utf-8-sig drops the BOM some spreadsheet exports prepend to the header
    df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    result = normalize_rows(df.to_dict("records"))
    logger.info(
        "Read %d rows from %s: %d unique companies, %d skipped",
        result.rows_read, path, len(result.companies), result.skipped_rows
    )
    return result
