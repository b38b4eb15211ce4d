"""Sensor Catalog — location registry, cached catalogue loading, directory.

Modules
───────
  naming     — location id → display name
  sources    — explicit registration table + JSON file source
  repository — read-through, coalescing, indexed catalogue cache
  directory  — enumerate locations with sensor counts
  generator  — synthetic data-center catalogues (demo data, scale tests)
  cli        — argparse entry-point
"""
