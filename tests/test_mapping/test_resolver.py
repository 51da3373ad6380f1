"""
Unit tests for the fallback resolver (claimfill/mapping/resolver.py).

This module tests:
- The order of resolution steps (exact, normalized, group, related names)
- Role suffix isolation for PIN and PAN
- Bank anti-contamination for claimant addresses and PINs
- Warnings attached to each resolved value
"""

import pytest
from claimfill.mapping.constants import ResolutionSource, SemanticCategory, WarningKind
from claimfill.mapping.index import build_group_index
from claimfill.mapping.resolver import related_name_categories, resolve_placeholder
from claimfill.mapping.schemas import RawField


def resolve(rows, placeholder, settings):
    index = build_group_index([RawField(key=k, value=v) for k, v in rows], settings)
    return resolve_placeholder(placeholder, index.raw_values, index, settings)


def kinds(resolved):
    return [w.kind for w in resolved.warnings]


class TestResolutionSteps:
    """Test each step of the fallback chain."""

    def test_exact_match(self, claim_index, settings):
        result = resolve_placeholder("PAN C1", claim_index.raw_values, claim_index, settings)
        assert result.value == "ABCDE1234F"
        assert result.source == ResolutionSource.EXACT
        assert result.source_key == "PAN C1"
        assert result.category == SemanticCategory.PAN
        assert result.suffix == "C1"
        assert result.warnings == []

    def test_exact_value_is_sanitized(self, claim_index, settings):
        result = resolve_placeholder("DOD H1", claim_index.raw_values, claim_index, settings)
        assert result.value == "05/03/2024"
        result = resolve_placeholder("Certificate Numbers", claim_index.raw_values, claim_index, settings)
        assert result.value == "CERT1, CERT2"

    def test_normalized_match(self, claim_index, settings):
        result = resolve_placeholder("name as per  pan c1", claim_index.raw_values, claim_index, settings)
        assert result.value == "JANE DOE"
        assert result.source == ResolutionSource.NORMALIZED
        assert result.source_key == "Name as per PAN C1"

    def test_markup_in_placeholder(self, claim_index, settings):
        result = resolve_placeholder("<w:t>PAN</w:t> C1", claim_index.raw_values, claim_index, settings)
        assert result.value == "ABCDE1234F"
        assert result.source == ResolutionSource.NORMALIZED

    def test_same_group_alternate_spelling(self, settings):
        rows = [("Address C1", ""), ("Residing at C1", "5 Hill Road, Nashik")]
        result = resolve(rows, "Address C1", settings)
        assert result.value == "5 Hill Road, Nashik"
        assert result.source == ResolutionSource.FALLBACK
        assert result.source_key == "Residing at C1"

    def test_first_valid_group_member_wins(self, settings):
        rows = [("Address C1", "undefined"), ("address_c1", "First Road"), ("Residing at C1", "Second Road")]
        assert resolve(rows, "Address C1", settings).value == "First Road"

    def test_unresolved(self, claim_index, settings):
        result = resolve_placeholder("Passport No C1", claim_index.raw_values, claim_index, settings)
        assert result.value == ""
        assert result.source == ResolutionSource.EMPTY
        assert result.is_empty
        assert kinds(result) == [WarningKind.UNRESOLVED]

    def test_sentinel_value_resolves_empty(self, claim_index, settings):
        result = resolve_placeholder("Email ID C1", claim_index.raw_values, claim_index, settings)
        assert result.value == ""
        assert result.source == ResolutionSource.EMPTY


class TestNameFallback:
    """Test widening a name placeholder to sibling name sources."""

    def test_pan_name_falls_back_to_aadhar(self, settings):
        rows = [("Name as per PAN C1", "undefined"), ("Name as per Aadhar C1", "Jane Doe")]
        result = resolve(rows, "Name as per PAN C1", settings)
        assert result.value == "Jane Doe"
        assert result.source == ResolutionSource.FALLBACK
        assert result.source_key == "Name as per Aadhar C1"

    def test_only_aadhar_name_present(self, settings):
        result = resolve([("Name as per Aadhar C1", "Jane Doe")], "Name as per PAN C1", settings)
        assert result.value == "Jane Doe"
        assert result.warnings == []

    def test_priority_order(self, settings):
        rows = [
            ("Name as per Passport C1", "J. Doe"),
            ("Name as per CML C1", "Jane M Doe"),
            ("Name as per Bank C1", "Jane Doe"),
        ]
        assert resolve(rows, "Name as per PAN C1", settings).value == "Jane M Doe"

    def test_fallback_uses_claimant_of_same_suffix(self, claim_index, settings):
        result = resolve_placeholder("Name as per PAN C2", claim_index.raw_values, claim_index, settings)
        assert result.value == "Ravi Kumar"

    def test_no_name_from_another_suffix(self, claim_index, settings):
        result = resolve_placeholder("Name as per PAN C3", claim_index.raw_values, claim_index, settings)
        assert result.value == ""
        assert kinds(result) == [WarningKind.UNRESOLVED]

    def test_pan_shaped_name_is_skipped(self, settings):
        rows = [("Name as per PAN C1", "ABCDE1234F"), ("Name as per Aadhar C1", "Jane Doe")]
        result = resolve(rows, "Name as per PAN C1", settings)
        assert result.value == "Jane Doe"
        assert WarningKind.CONTAMINATED in kinds(result)

    @pytest.mark.parametrize("key", [
        "Name of Father C1",
        "Name of Husband C1",
        "Father Name C1",
        "Mother Name C1",
        "Nominee Name C1",
        "Guardian Name C1",
    ])
    def test_relative_name_never_fills_claimant_name(self, settings, key):
        result = resolve([(key, "Ramesh Doe")], "Name as per PAN C1", settings)
        assert result.value == ""
        assert kinds(result) == [WarningKind.UNRESOLVED]

    def test_relative_names_are_not_alternates(self, settings):
        rows = [("Mother Name C1", "Sunita Doe"), ("Nominee Name C1", "Ravi Doe")]
        assert resolve(rows, "Nominee Name C1", settings).value == "Ravi Doe"
        assert resolve(rows, "Guardian Name C1", settings).value == ""

    def test_related_name_categories(self):
        related = related_name_categories(SemanticCategory.NAME_PAN)
        assert related[:6] == [
            SemanticCategory.NAME_AADHAR,
            SemanticCategory.NAME_CML,
            SemanticCategory.NAME_BANK,
            SemanticCategory.NAME_PASSPORT,
            SemanticCategory.NAME_SUCCESSION,
            SemanticCategory.NAME_CERT,
        ]
        assert SemanticCategory.NAME_PAN not in related
        assert SemanticCategory.FATHER_NAME not in related

    def test_non_name_categories_have_no_relatives(self):
        assert related_name_categories(SemanticCategory.PIN) == []
        assert related_name_categories(SemanticCategory.FATHER_NAME) == []


class TestSuffixIsolation:
    """PIN and PAN are never borrowed from another entity."""

    def test_pin_not_taken_from_other_claimant(self, claim_index, settings):
        result = resolve_placeholder("PIN C2", claim_index.raw_values, claim_index, settings)
        assert result.value == ""
        assert result.source == ResolutionSource.EMPTY

    def test_pan_not_taken_from_other_claimant(self, claim_index, settings):
        result = resolve_placeholder("PAN C2", claim_index.raw_values, claim_index, settings)
        assert result.value == ""

    def test_unsuffixed_pin_does_not_borrow(self, settings):
        rows = [("PIN C1", "411001")]
        assert resolve(rows, "PIN", settings).value == ""

    @pytest.mark.parametrize("value", ["411 001", "4110", "Pune"])
    def test_malformed_pin_rejected(self, settings, value):
        result = resolve([("PIN C1", value)], "PIN C1", settings)
        assert result.value == ""
        assert WarningKind.CONTAMINATED in kinds(result)


class TestBankContamination:
    """Bank details never fill claimant address or PIN slots."""

    def test_bank_text_in_address(self, settings):
        rows = [
            ("Address C1", "Ambar Plaza, Bank Branch, Ahmednagar"),
            ("Bank Address C1", "Ambar Plaza, Bank Branch, Ahmednagar"),
        ]
        result = resolve(rows, "Address C1", settings)
        assert result.value == ""
        assert result.source == ResolutionSource.EMPTY
        assert kinds(result) == [WarningKind.CONTAMINATED, WarningKind.UNRESOLVED]
        assert result.warnings[0].key == "Address C1"
        assert result.warnings[0].category == SemanticCategory.ADDRESS

    def test_address_copied_from_bank_address(self, settings):
        rows = [("Address C1", "Ambar Plaza, Ahmednagar"), ("Bank Address C1", "Ambar Plaza, Ahmednagar")]
        assert resolve(rows, "Address C1", settings).value == ""

    def test_bank_address_of_another_suffix_is_ignored(self, settings):
        rows = [("Address C1", "Ambar Plaza, Ahmednagar"), ("Bank Address C2", "Ambar Plaza, Ahmednagar")]
        assert resolve(rows, "Address C1", settings).value == "Ambar Plaza, Ahmednagar"

    def test_pin_copied_from_bank_pin(self, settings):
        rows = [("PIN C1", "414001"), ("Bank PIN C1", "414001")]
        result = resolve(rows, "PIN C1", settings)
        assert result.value == ""
        assert WarningKind.CONTAMINATED in kinds(result)

    def test_claimant_address_unaffected(self, claim_index, settings):
        result = resolve_placeholder("Address C1", claim_index.raw_values, claim_index, settings)
        assert result.value == "12 MG Road, Pune"

    def test_bank_placeholder_keeps_bank_text(self, claim_index, settings):
        result = resolve_placeholder("Bank Address C1", claim_index.raw_values, claim_index, settings)
        assert result.value == "Ambar Plaza, Station Road, Ahmednagar"


class TestDateWarnings:
    def test_malformed_date(self, settings):
        result = resolve([("DOB C1", "sometime in 1980")], "DOB C1", settings)
        assert result.value == ""
        assert kinds(result) == [WarningKind.MALFORMED_DATE, WarningKind.UNRESOLVED]

    def test_date_reformatted(self, claim_index, settings):
        result = resolve_placeholder("DOB C1", claim_index.raw_values, claim_index, settings)
        assert result.value == "14/07/1980"
