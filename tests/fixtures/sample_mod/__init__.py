"""Fixture mod package loaded end-to-end by startup tests."""
