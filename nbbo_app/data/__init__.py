"""
Record models and ingestion module.

Defines the raw quote/trade records, the per-symbol exchange book, the
derived NBBO snapshot and merged output rows, plus record validation and
CSV sources.
"""
