"""
imagescope_positivity
---------------------
Summarize ImageScope annotation XML files: labels of user-drawn regions
merged with positive pixel count statistics, one CSV row per region.

Modules:
    models.py   - Annotation tree dataclasses and the per-region record
    io.py       - XML parsing and annotation file discovery
    regions.py  - Merging drawn regions with computed statistics
    batch.py    - Row formatting and folder-level processing
    cli.py      - Command-line entry point
"""

__version__ = "1.0.0"
