#!/usr/bin/env python3
"""Demo entry point for the timed quiz."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from timed_quiz.runner import main


if __name__ == "__main__":
    main()
