"""Boatyard — placement and collision engine for boat storage yards.

Packages, bottom-up:

  geometry      — unit conversion, footprints, rectangles and polygons
  storage       — storage geometry parsing and bounds/area/capacity
  placer        — collision engine, candidate search and bulk layout
  maintenance   — reconciliation, bulk rotation and zone pruning
  data          — JSON data directory loading and saving
  render        — adapter between the geometric model and a canvas

All physical quantities are metres; canvas units only appear at the
data-file and rendering boundaries.
"""
