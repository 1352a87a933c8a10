#!/usr/bin/env python3
"""Standalone pipeline runner script."""

from __future__ import annotations

from isosurface_pipeline.cli import main

if __name__ == "__main__":
    main()
