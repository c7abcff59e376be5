"""Corpus-wide indices and related-post ranking."""
