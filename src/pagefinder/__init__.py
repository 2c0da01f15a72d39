"""PageFinder - page-level retrieval over uploaded PDFs."""

__version__ = "0.1.0"
