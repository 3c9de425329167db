#!/usr/bin/env python3
"""Run the scene data dump scanner from a source checkout."""

from scene_dump.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
