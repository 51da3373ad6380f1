"""
Unit tests for the mapping module (claimfill/mapping/).

Test suites:
- test_normalization: Key normalization, category and role-suffix parsing
- test_sanitizer: Sentinel detection, cleanup, dates, lists and contamination checks
- test_index: Grouping of raw fields by (category, suffix)
- test_resolver: Ordered fallback search for one placeholder
- test_builder: Whole-document map, deduplication, post-validation, warnings
- test_preview: Sectioned mapping preview
"""
