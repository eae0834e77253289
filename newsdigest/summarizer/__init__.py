"""Content normalization and summarization pipeline."""
