#!/usr/bin/env python3
"""
Pipework – run external tools with captured output and decoded exit status.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from pipework.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
