"""Pipeline orchestration: install, pull, scan, then best-effort uploads."""
