"""
SUBISO BENCHMARK HARNESS

Runs golden set cases (host + pattern topologies) through the search with:
- Per-case metrics (found, expected, timing, search statistics)
- Optional timeout per case (external deadline observer)
- Polars summary per tier/strategy
- JSONL metrics output (one line per case)

Usage:
    python -m benchmarks.harness --tier smoke
    python -m benchmarks.harness --tier stress --timeout 5
    python -m benchmarks.harness --case triangle_in_path --strategy iterative
    python -m benchmarks.harness --list
    python -m benchmarks.harness --config my.toml   # runs [benchmark] default_tier

Folder Structure (under the [benchmark] output_dir, default workspace/benchmark/):
    metrics/{run_id}.jsonl  - Metrics for each run
"""
import argparse
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import msgspec
import polars as pl
import yaml

from core.errors import SearchAbortedError
from core.schemas import SearchSettings
from core.validator import is_embedding
from forge.topologist import create_from_config, relabel, random_permutation
from infrastructure.config import configure_logging, load_settings, load_toml_config
from infrastructure.deadline import match_subgraph_with_deadline

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

GOLDEN_SET_PATH = Path(__file__).parent / "golden_set.yaml"
DEFAULT_OUTPUT_DIR = Path("workspace") / "benchmark"


# =============================================================================
# METRICS COLLECTION
# =============================================================================

class CaseMetrics(msgspec.Struct, kw_only=True):
    """Metrics for a single case execution."""
    case_id: str
    case_name: str
    tier: str
    strategy: str
    propagation: str

    host_vertices: int = 0
    host_edges: int = 0
    pattern_vertices: int = 0
    pattern_edges: int = 0

    # Outcome
    found: Optional[bool] = None        # None if aborted
    expected_found: Optional[bool] = None
    passed: bool = False
    mapping: Optional[List[int]] = None
    aborted: bool = False
    error_message: str = ""

    # Search statistics
    duration_ms: float = 0.0
    states_visited: int = 0
    commits: int = 0
    backtracks: int = 0
    propagation_passes: int = 0
    candidates_pruned: int = 0


class RunMetrics(msgspec.Struct, kw_only=True):
    """Metrics for a complete benchmark run."""
    run_id: str
    tier: str
    start_time: str
    end_time: str = ""
    duration_seconds: float = 0.0
    cases_attempted: int = 0
    cases_passed: int = 0
    cases_failed: int = 0
    case_metrics: List[CaseMetrics] = []
    slowest_case: str = ""


class MetricsCollector:
    """Collects and persists metrics during benchmark runs."""

    def __init__(self, run_id: str, tier: str, output_dir: Path = DEFAULT_OUTPUT_DIR):
        self.run_id = run_id
        self.tier = tier
        self.metrics_dir = Path(output_dir) / "metrics"
        self.run_metrics = RunMetrics(
            run_id=run_id,
            tier=tier,
            start_time=datetime.now(timezone.utc).isoformat(),
        )

    def record(self, case: CaseMetrics) -> None:
        run = self.run_metrics
        run.case_metrics.append(case)
        run.cases_attempted += 1
        if case.passed:
            run.cases_passed += 1
        else:
            run.cases_failed += 1

    def finalize(self) -> RunMetrics:
        """Finalize the run and compute aggregates."""
        run = self.run_metrics
        run.end_time = datetime.now(timezone.utc).isoformat()
        start = datetime.fromisoformat(run.start_time)
        end = datetime.fromisoformat(run.end_time)
        run.duration_seconds = (end - start).total_seconds()

        if run.case_metrics:
            slowest = max(run.case_metrics, key=lambda c: c.duration_ms)
            run.slowest_case = f"{slowest.case_id} ({slowest.duration_ms:.1f}ms)"
        return run

    def summarize(self) -> pl.DataFrame:
        """Aggregate per tier and strategy."""
        return summarize_cases(self.run_metrics.case_metrics)

    def save(self) -> Path:
        """Write one JSON line per case."""
        self.metrics_dir.mkdir(parents=True, exist_ok=True)
        metrics_file = self.metrics_dir / f"{self.run_id}.jsonl"
        encoder = msgspec.json.Encoder()
        with open(metrics_file, "wb") as f:
            for case in self.run_metrics.case_metrics:
                f.write(encoder.encode(case) + b"\n")
        return metrics_file

    def print_summary(self) -> None:
        print_run_summary(self.run_metrics)


def print_run_summary(run: RunMetrics) -> None:
    """Print a summary of the run."""
    print("\n" + "=" * 70)
    print("BENCHMARK RUN SUMMARY")
    print("=" * 70)
    print(f"Run ID: {run.run_id}")
    print(f"Tier: {run.tier}")
    print(f"Duration: {run.duration_seconds:.2f}s")
    print(f"Cases: {run.cases_passed}/{run.cases_attempted} passed")
    if run.slowest_case:
        print(f"Slowest Case: {run.slowest_case}")
    print()
    print("Per-Case Results:")
    print("-" * 70)
    for case in run.case_metrics:
        status = "PASS" if case.passed else ("ABORT" if case.aborted else "FAIL")
        print(f"  [{status}] {case.case_id}: {case.case_name}")
        print(f"        {case.duration_ms:.2f}ms | states {case.states_visited} | "
              f"backtracks {case.backtracks} | mapping {case.mapping}")
        if case.error_message:
            print(f"        Error: {case.error_message[:60]}")
    print()
    if run.case_metrics:
        print(summarize_cases(run.case_metrics))
    print("=" * 70)


def summarize_cases(cases: List[CaseMetrics]) -> pl.DataFrame:
    """
    Group case metrics by tier, strategy and propagation mode.

    Returns:
        DataFrame with case counts, pass counts and timing/search totals
    """
    if not cases:
        return pl.DataFrame()
    frame = pl.DataFrame([msgspec.to_builtins(case) for case in cases])
    return (
        frame.group_by(["tier", "strategy", "propagation"])
        .agg([
            pl.len().alias("cases"),
            pl.col("passed").sum().alias("passed"),
            pl.col("duration_ms").sum().alias("total_ms"),
            pl.col("duration_ms").max().alias("max_ms"),
            pl.col("states_visited").sum().alias("states"),
            pl.col("backtracks").sum().alias("backtracks"),
        ])
        .sort(["tier", "strategy", "propagation"])
    )


# =============================================================================
# CASE EXECUTION
# =============================================================================

def load_golden_set(path: Path = GOLDEN_SET_PATH) -> Dict[str, Any]:
    """Load the golden set configuration."""
    with open(path) as f:
        return yaml.safe_load(f)


def build_case_graphs(case: Dict[str, Any]):
    """
    Build (host, pattern) for a case.

    A pattern entry may carry relabel_seed to shuffle its vertex ids.
    """
    host = create_from_config(case["host"])
    pattern_config = dict(case["pattern"])
    relabel_seed = pattern_config.pop("relabel_seed", None)
    pattern = create_from_config(pattern_config)
    if relabel_seed is not None:
        pattern = relabel(pattern, random_permutation(pattern.vertex_count, seed=relabel_seed))
    return host, pattern


def run_case(case: Dict[str, Any], tier: str, settings: SearchSettings) -> CaseMetrics:
    """Run one golden set case and score it."""
    host, pattern = build_case_graphs(case)
    metrics = CaseMetrics(
        case_id=case["id"],
        case_name=case.get("name", case["id"]),
        tier=tier,
        strategy=settings.strategy,
        propagation=settings.propagation,
        host_vertices=host.vertex_count,
        host_edges=host.edge_count,
        pattern_vertices=pattern.vertex_count,
        pattern_edges=pattern.edge_count,
        expected_found=case.get("expected_found"),
    )

    start = time.perf_counter()
    try:
        result = match_subgraph_with_deadline(host, pattern, settings=settings)
    except SearchAbortedError as e:
        metrics.duration_ms = (time.perf_counter() - start) * 1000
        metrics.aborted = True
        metrics.error_message = str(e)
        return metrics

    metrics.duration_ms = result.elapsed_seconds * 1000
    metrics.found = result.found
    metrics.mapping = result.mapping
    metrics.states_visited = result.stats.states_visited
    metrics.commits = result.stats.commits
    metrics.backtracks = result.stats.backtracks
    metrics.propagation_passes = result.stats.propagation_passes
    metrics.candidates_pruned = result.stats.candidates_pruned

    if result.found and not is_embedding(host, pattern, result.mapping):
        metrics.error_message = f"Returned mapping is not an embedding: {result.mapping}"
    elif metrics.expected_found is not None and metrics.expected_found != result.found:
        metrics.error_message = f"Expected found={metrics.expected_found}, got {result.found}"
    else:
        metrics.passed = True
    return metrics


def select_cases(golden_set: Dict[str, Any], tier: Optional[str], case_id: Optional[str]) -> List[Dict[str, Any]]:
    cases = {case["id"]: case for case in golden_set.get("cases", [])}
    if case_id:
        if case_id not in cases:
            raise ValueError(f"Unknown case: {case_id}")
        return [cases[case_id]]
    tiers = golden_set.get("tiers", {})
    if tier not in tiers:
        raise ValueError(f"Unknown tier: {tier} (available: {sorted(tiers)})")
    return [cases[cid] for cid in tiers[tier]]


def run_benchmark(
    tier: Optional[str] = None,
    case_id: Optional[str] = None,
    settings: Optional[SearchSettings] = None,
    output_dir: Optional[Path] = None,
    golden_set_path: Path = GOLDEN_SET_PATH,
    save: bool = True,
    config_path: Optional[Path] = None,
) -> RunMetrics:
    """
    Run a tier (or a single case) of the golden set.

    Args:
        config_path: TOML file for both [search] (when settings is None)
                     and [benchmark]; default lookup when None

    Returns:
        Finalized RunMetrics
    """
    settings = settings or load_settings(config_path)
    benchmark_config = load_toml_config(config_path).get("benchmark", {})
    if output_dir is None:
        output_dir = Path(benchmark_config.get("output_dir", DEFAULT_OUTPUT_DIR))

    golden_set = load_golden_set(golden_set_path)
    cases = select_cases(golden_set, tier, case_id)
    label = tier or case_id

    run_id = f"{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
    collector = MetricsCollector(run_id, label, output_dir=output_dir)

    for case in cases:
        logger.info(f"Running case {case['id']}")
        collector.record(run_case(case, label, settings))

    run = collector.finalize()
    if save:
        metrics_file = collector.save()
        logger.info(f"Metrics saved to {metrics_file}")
    return run


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Subiso Benchmark Harness",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m benchmarks.harness --tier smoke
    python -m benchmarks.harness --tier stress --timeout 5 --strategy iterative
    python -m benchmarks.harness --case triangle_in_path
        """
    )
    parser.add_argument("--tier", help="Run all cases in a tier (default: [benchmark] default_tier)")
    parser.add_argument("--case", help="Run a specific case by ID")
    parser.add_argument("--list", action="store_true", help="List available cases and tiers")
    parser.add_argument("--strategy", choices=["recursive", "iterative"], help="Search strategy")
    parser.add_argument("--propagation", choices=["single", "fixpoint"], help="Propagation mode")
    parser.add_argument("--timeout", type=float, help="Per-case timeout in seconds")
    parser.add_argument("--config", help="Path to a subiso TOML config")
    parser.add_argument("--no-save", action="store_true", help="Do not write metrics")

    args = parser.parse_args(argv)

    if args.list:
        golden_set = load_golden_set()
        print("\nAvailable Tiers:")
        for tier, case_ids in golden_set.get("tiers", {}).items():
            print(f"  {tier}: {case_ids}")
        print("\nAvailable Cases:")
        for case in golden_set.get("cases", []):
            print(f"  {case['id']}: {case.get('name', '')}")
        return 0

    tier = args.tier
    if not tier and not args.case:
        tier = load_toml_config(args.config).get("benchmark", {}).get("default_tier")
        if not tier:
            parser.error("Must specify either --tier or --case (or --list), "
                         "or set [benchmark] default_tier in the config")

    settings = load_settings(args.config, overrides={
        "strategy": args.strategy,
        "propagation": args.propagation,
        "timeout_seconds": args.timeout,
    })
    logging.basicConfig(format="%(asctime)s %(name)s %(levelname)s %(message)s")
    configure_logging(settings.log_level)

    run = run_benchmark(
        tier=tier,
        case_id=args.case,
        settings=settings,
        save=not args.no_save,
        config_path=args.config,
    )
    print_run_summary(run)
    return 0 if run.cases_failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
