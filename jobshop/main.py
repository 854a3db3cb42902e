"""Command-line harness: run several solvers over several instances and compare.

Settings come from an optional YAML/JSON config file; command-line flags
override it. For every (instance, solver) pair the table shows runtime,
makespan and the gap to the best known makespan, followed by per-solver
averages. Optional artefacts: JSON summary, Gantt and convergence charts.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, TextIO

import yaml

from jobshop import best_known
from jobshop.models import Instance
from jobshop.parser import load_instance
from jobshop.solvers import SOLVERS, get_solver
from jobshop.solvers.base import deadline_in

logger = logging.getLogger("jobshop.cli")

DEFAULTS: Dict[str, Any] = {
    "instances_dir": "instances",
    "timeout_s": 1.0,
    "repeats": 1,
    "log_level": "WARNING",
}


def load_config(config_file: str) -> dict:
    """Load configuration from a YAML (``.yml``/``.yaml``) or JSON file."""
    if not os.path.isfile(config_file):
        raise FileNotFoundError(f"Config file not found: {config_file}")
    with open(config_file, "r", encoding="utf-8") as f:
        text = f.read()
    if config_file.endswith((".yml", ".yaml")):
        cfg = yaml.safe_load(text) or {}
    else:
        cfg = json.loads(text)
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {config_file} must contain a mapping")
    return cfg


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobshop", description="Solves jobshop problems.")
    parser.add_argument("--config", help="YAML/JSON config file (flags override it)")
    parser.add_argument(
        "-t", "--timeout", type=float, help="Solver timeout in seconds for each instance"
    )
    parser.add_argument("--solver", nargs="+", help="Solver(s) to use")
    parser.add_argument("--instance", nargs="+", help="Instance name(s) or file path(s)")
    parser.add_argument("--instances-dir", help="Directory searched for bare instance names")
    parser.add_argument("--repeats", type=int, help="Number of rounds over all instances")
    parser.add_argument("--charts-dir", help="Directory for Gantt and convergence charts")
    parser.add_argument("--output", help="Path of the JSON summary to write")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser


def resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = load_config(args.config) if args.config else {}
    charts_cfg = cfg.get("charts", {}) if isinstance(cfg.get("charts"), dict) else {}
    settings = dict(DEFAULTS)
    settings.update({k: v for k, v in cfg.items() if k != "charts"})
    settings["charts_dir"] = charts_cfg.get("dir")
    overrides = {
        "timeout_s": args.timeout,
        "solvers": args.solver,
        "instances": args.instance,
        "instances_dir": args.instances_dir,
        "repeats": args.repeats,
        "charts_dir": args.charts_dir,
        "output": args.output,
        "log_level": args.log_level,
    }
    settings.update({k: v for k, v in overrides.items() if v is not None})
    if not settings.get("solvers"):
        raise ValueError("No solver given (use --solver or 'solvers' in the config)")
    if not settings.get("instances"):
        raise ValueError("No instance given (use --instance or 'instances' in the config)")
    return settings


def run_benchmark(
    instances: Sequence[Instance],
    solver_names: Sequence[str],
    timeout_s: float,
    repeats: int = 1,
    charts_dir: Optional[str] = None,
    stream: TextIO = sys.stdout,
) -> list[dict]:
    """Solve every instance with every solver, print the comparison table.

    Returns:
        One record per (repeat, instance, solver).

    Raises:
        RuntimeError: If a solver returns an invalid schedule.
    """
    solvers = [get_solver(name) for name in solver_names]
    records: list[dict] = []
    for repeat in range(repeats):
        stream.write(" " * 25 + "".join(f"{name:<30}" for name in solver_names) + "\n")
        stream.write("instance size  best      " + "runtime makespan ecart        " * len(solvers))
        stream.write("\n")
        runtimes = [0.0] * len(solvers)
        gaps = [0.0] * len(solvers)
        for instance in instances:
            best = best_known.BEST_KNOWN.get(instance.name)
            size = f"{instance.jobs_number}x{instance.tasks_number}"
            best_txt = str(best) if best is not None else "-"
            stream.write(f"{instance.name:<8} {size:<5} {best_txt:>4}      ")
            histories: dict[str, list[int]] = {}
            for idx, solver in enumerate(solvers):
                t0 = time.perf_counter()
                result = solver.solve(instance, deadline_in(timeout_s))
                runtime_ms = (time.perf_counter() - t0) * 1000.0
                if not result.schedule.is_valid():
                    logger.error("solver %s returned an invalid schedule", solver.name)
                    raise RuntimeError(f"solver {solver.name} returned an invalid schedule")
                makespan = result.makespan
                gap = best_known.gap_percent(makespan, instance.name)
                runtimes[idx] += runtime_ms / len(instances)
                gaps[idx] += (gap or 0.0) / len(instances)
                gap_txt = f"{gap:5.1f}" if gap is not None else "    -"
                stream.write(f"{runtime_ms:7.0f} {makespan:8d} {gap_txt}        ")
                stream.flush()
                histories[solver.name] = result.history
                records.append(
                    {
                        "repeat": repeat,
                        "instance": instance.name,
                        "solver": solver.name,
                        "runtime_ms": runtime_ms,
                        "makespan": makespan,
                        "best_known": best,
                        "gap_percent": gap,
                        "cause": result.cause.value,
                    }
                )
                if charts_dir:
                    from jobshop.visualization import plot_gantt

                    plot_gantt(
                        result.schedule,
                        save_path=os.path.join(
                            charts_dir, f"gantt_{solver.name}_{instance.name}_c{makespan}.png"
                        ),
                        algo_name=solver.name,
                    )
            stream.write("\n")
            if charts_dir:
                from jobshop.visualization import plot_convergence

                plot_convergence(
                    histories,
                    save_path=os.path.join(charts_dir, f"convergence_{instance.name}.png"),
                    title=f"Convergence - {instance.name}",
                )
        stream.write(f"{'AVG':<8} {'-':<5} {'-':>4}      ")
        for idx in range(len(solvers)):
            stream.write(f"{runtimes[idx]:7.1f} {'-':>8} {gaps[idx]:5.1f}        ")
        stream.write("\n\n")
    return records


def summarize(records: list[dict]) -> dict:
    """Per-solver averages of runtime and gap over all records."""
    per_solver: dict[str, dict[str, list[float]]] = {}
    for rec in records:
        entry = per_solver.setdefault(rec["solver"], {"runtime_ms": [], "gap_percent": []})
        entry["runtime_ms"].append(rec["runtime_ms"])
        if rec["gap_percent"] is not None:
            entry["gap_percent"].append(rec["gap_percent"])

    def _avg(vals: list[float]) -> Optional[float]:
        return sum(vals) / len(vals) if vals else None

    return {
        name: {
            "avg_runtime_ms": _avg(vals["runtime_ms"]),
            "avg_gap_percent": _avg(vals["gap_percent"]),
        }
        for name, vals in per_solver.items()
    }


def write_summary_json(path: str, settings: Dict[str, Any], records: list[dict]) -> str:
    payload = {
        "timestamp": datetime.now().strftime("%Y%m%d_%H%M%S"),
        "timeout_s": settings["timeout_s"],
        "repeats": settings["repeats"],
        "solvers": list(settings["solvers"]),
        "instances": list(settings["instances"]),
        "runs": records,
        "averages": summarize(records),
    }
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
    logger.info("Saved results JSON to %s", path)
    return path


def main(argv: Optional[Sequence[str]] = None, stream: TextIO = sys.stdout) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args)
    except (ValueError, FileNotFoundError) as e:
        parser.error(str(e))

    logging.basicConfig(
        level=getattr(logging, str(settings["log_level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    unknown = [name for name in settings["solvers"] if name not in SOLVERS]
    if unknown:
        logger.error("Solver(s) not available: %s", ", ".join(unknown))
        logger.error("Available solvers: %s", ", ".join(SOLVERS))
        return 1
    try:
        instances = [
            load_instance(name, settings["instances_dir"]) for name in settings["instances"]
        ]
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    try:
        records = run_benchmark(
            instances,
            settings["solvers"],
            timeout_s=float(settings["timeout_s"]),
            repeats=int(settings["repeats"]),
            charts_dir=settings.get("charts_dir"),
            stream=stream,
        )
    except RuntimeError as e:
        logger.error("%s", e)
        return 1
    if settings.get("output"):
        write_summary_json(settings["output"], settings, records)
    return 0


if __name__ == "__main__":
    sys.exit(main())
