"""
Entry point for running docx-preview as a module.

Usage:
    python -m docx_preview input.docx [output.html] [options]
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
