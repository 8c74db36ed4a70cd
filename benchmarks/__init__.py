"""
Subiso Benchmarks

Golden set runs of the subgraph search over generated topologies.

Run with:
    python -m benchmarks.harness --tier smoke
"""

from benchmarks.harness import run_benchmark, run_case, summarize_cases

__all__ = ["run_benchmark", "run_case", "summarize_cases"]
