"""
Command-line interface for batch processing ImageScope annotation XML files.

Uses the `main()` function defined in `imagescope_positivity/cli.py`.

Example usage:
    python batch_cli.py ./data/annotations --output ./results/summary.csv
"""

import sys

from imagescope_positivity.cli import main


if __name__ == "__main__":
    sys.exit(main())
