"""Workload packages built on top of the MovR generation libraries."""
