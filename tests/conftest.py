"""
Pytest configuration and fixtures for claimfill tests.

This module provides shared fixtures for all tests: engine settings, realistic
claim field rows (claimants, deceased holder, legal heir, bank details) and a
factory for small Word templates built with python-docx.
"""

import pytest
from pathlib import Path
from typing import Dict, List, Optional

from docx import Document

from claimfill.config import MappingSettings
from claimfill.mapping import RawField, build_group_index


# ============================================================================
# PATH FIXTURES
# ============================================================================

@pytest.fixture(scope="session")
def project_root():
    """Return the root directory of the project."""
    return Path(__file__).parent.parent


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def settings():
    """Default engine settings, independent of the developer's environment."""
    return MappingSettings()


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Keep CLAIMFILL_* variables from the shell out of the tests."""
    for name in (
        "CLAIMFILL_TWO_DIGIT_YEAR_PIVOT",
        "CLAIMFILL_SENTINEL_UNDERSCORE_MIN",
        "CLAIMFILL_PAN_MIN_LENGTH",
        "CLAIMFILL_PIN_MIN_LENGTH",
        "CLAIMFILL_DATE_OUTPUT_FORMAT",
        "CLAIMFILL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# SAMPLE DATA FACTORIES
# ============================================================================

@pytest.fixture
def claim_rows() -> List[Dict[str, Optional[str]]]:
    """A case with two claimants, one deceased holder, one legal heir and bank details."""
    return [
        {"key": "Name as per Aadhar C1", "value": "Jane Doe"},
        {"key": "Name as per PAN C1", "value": "JANE DOE"},
        {"key": "PAN C1", "value": "ABCDE1234F"},
        {"key": "Father Name C1", "value": "John Doe"},
        {"key": "Address C1", "value": "12 MG Road, Pune"},
        {"key": "PIN C1", "value": "411001"},
        {"key": "DOB C1", "value": "1980-07-14"},
        {"key": "Mobile No C1", "value": "9876543210"},
        {"key": "Email ID C1", "value": "undefined"},
        {"key": "Bank Name C1", "value": "HDFC Bank"},
        {"key": "Bank Address C1", "value": "Ambar Plaza, Station Road, Ahmednagar"},
        {"key": "Bank PIN C1", "value": "414001"},
        {"key": "IFSC C1", "value": "HDFC0001234"},
        {"key": "Name as per CML C2", "value": "Ravi Kumar"},
        {"key": "PAN C2", "value": None},
        {"key": "Address C2", "value": "____"},
        {"key": "Name as per DC H1", "value": "Late Shri Ram Doe"},
        {"key": "DOD H1", "value": "5/3/24"},
        {"key": "Name as per Aadhar LH1", "value": "Sita Doe"},
        {"key": "Relation LH1", "value": "Daughter"},
        {"key": "Certificate Numbers", "value": "CERT1, , &, CERT2,"},
        {"key": "Company Name", "value": "A & B Company Pvt. Ltd."},
    ]


@pytest.fixture
def claim_fields(claim_rows) -> List[RawField]:
    return [RawField(**row) for row in claim_rows]


@pytest.fixture
def claim_index(claim_fields, settings):
    return build_group_index(claim_fields, settings)


# ============================================================================
# DOCUMENT FIXTURES
# ============================================================================

@pytest.fixture
def make_template(tmp_path):
    """Factory writing a .docx with the given paragraphs and an optional one-row table."""
    def _make(paragraphs: List[str], table_cells: Optional[List[str]] = None, name: str = "template.docx") -> Path:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table_cells:
            table = doc.add_table(rows=1, cols=len(table_cells))
            for i, text in enumerate(table_cells):
                table.cell(0, i).text = text
        path = tmp_path / name
        doc.save(str(path))
        return path
    return _make
