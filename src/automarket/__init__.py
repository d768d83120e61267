"""Auto marketplace backend: car listings and seller/customer profiles over a document store."""

__version__ = "1.0.0"
