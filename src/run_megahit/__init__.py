"""Batch MEGAHIT assemblies over a directory of paired/single read files."""

__version__ = "0.1.0"
