"""
MovR Workload Package

MovR is a fictional ride sharing company. This package exposes the MovR tables,
their deterministic row generators and the validation and post-load hooks as a
single workload object that benchmarking drivers can consume.
"""

from movr_datagen.packages.movr.movr_workload import MovrWorkload, WorkloadMeta, WorkloadTable

__all__ = ["MovrWorkload", "WorkloadMeta", "WorkloadTable"]
