"""Taxonomy, read parsing, barcode handling and compact data structures for metagenomic read classification."""

__version__ = "1.0.8"