# src/readqc/__main__.py
import sys

from readqc.cli import main

sys.exit(main())
