#!/usr/bin/env python3
"""Universe pacing simulation for population and career calibration.

Real-life anchors used for comparison:
- Most professionals retire somewhere between their early thirties and about 40.
- A healthy division keeps a steady pool of ranked contenders while prospects replace retirees.

This script runs the weekly world simulation for a number of seasons and reports
population drift, retirement ages, title turnover, and Hall of Fame intake.
"""

from __future__ import annotations

import argparse
import logging
import random
import statistics
import sys
from pathlib import Path


def _bootstrap_project_path() -> None:
    root = Path(__file__).resolve().parents[1]
    candidate = str(root)
    if candidate not in sys.path:
        sys.path.insert(0, candidate)


_bootstrap_project_path()

from boxing_universe.models import Universe, UniverseConfig
from boxing_universe.modules.universe_setup import create_universe
from boxing_universe.modules.week_processor import WeekProcessor

REAL_WORLD_RETIREMENT_AGE_MIN = 31.0
REAL_WORLD_RETIREMENT_AGE_MAX = 40.0


def _percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    idx = int((len(values) - 1) * p)
    return sorted(values)[idx]


def simulate_universe(seed: int, *, weeks: int, population: int, workers: int) -> tuple[Universe, list[int]]:
    rng = random.Random(seed)
    config = UniverseConfig(
        target_population=population,
        population_variance=max(1, population // 5),
        combat_workers=workers,
    )
    universe = create_universe(config=config, rng=rng)
    processor = WeekProcessor(universe, rng=rng)

    population_samples: list[int] = []
    for week in range(weeks):
        processor.process_week()
        if week % 52 == 51:
            population_samples.append(universe.population)
    return universe, population_samples


def summarize(universe: Universe, population_samples: list[int]) -> dict[str, float]:
    retirement_ages = [float(record.age) for record in universe.history.retirements]
    reigns = [reign for body in universe.sanctioning_bodies.values() for reign in body.reigns]
    return {
        "population_final": float(universe.population),
        "population_min": float(min(population_samples, default=universe.population)),
        "population_max": float(max(population_samples, default=universe.population)),
        "retirements": float(len(retirement_ages)),
        "retirement_age_avg": statistics.mean(retirement_ages) if retirement_ages else 0.0,
        "retirement_age_p10": _percentile(retirement_ages, 0.1),
        "retirement_age_p90": _percentile(retirement_ages, 0.9),
        "title_reigns": float(len(reigns)),
        "open_reigns": float(sum(1 for reign in reigns if reign.is_open)),
        "hall_of_fame": float(len(universe.hall_of_fame.inductees)),
        "upsets": float(len(universe.history.upsets)),
        "staff": float(len(universe.staff)),
    }


def _print_report(universe: Universe, report: dict[str, float]) -> None:
    stats = universe.stats
    avg_age = report["retirement_age_avg"]
    in_range = REAL_WORLD_RETIREMENT_AGE_MIN <= avg_age <= REAL_WORLD_RETIREMENT_AGE_MAX

    print(f"\n== Universe at {universe.current_date} ==")
    print(
        "Population "
        f"final {report['population_final']:.0f} | "
        f"yearly min {report['population_min']:.0f} | "
        f"yearly max {report['population_max']:.0f} | "
        f"target {universe.config.target_population}"
    )
    print(
        "Fights "
        f"{stats.fights_simulated} "
        f"(KO {stats.knockouts}, decisions {stats.decisions}, draws {stats.draws}) | "
        f"upsets {report['upsets']:.0f}"
    )
    print(
        "Retirements "
        f"{report['retirements']:.0f} | "
        f"age avg {avg_age:.2f} "
        f"(p10={report['retirement_age_p10']:.0f}, p90={report['retirement_age_p90']:.0f})"
    )
    print(
        "Titles "
        f"reigns {report['title_reigns']:.0f} | "
        f"current champions {report['open_reigns']:.0f}"
    )
    print(
        f"Hall of Fame {report['hall_of_fame']:.0f} | "
        f"post-career staff {report['staff']:.0f} | "
        f"fighters generated {stats.fighters_generated}"
    )
    print(
        "Real-life retirement benchmark "
        f"{REAL_WORLD_RETIREMENT_AGE_MIN:.0f}-{REAL_WORLD_RETIREMENT_AGE_MAX:.0f} years: "
        f"{'IN RANGE' if in_range else 'OUT OF RANGE'}"
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run universe pacing simulations.")
    parser.add_argument(
        "--weeks",
        type=int,
        default=520,
        help="Number of simulated weeks (default: 520).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=1,
        help="Seed for the universe random stream (default: 1).",
    )
    parser.add_argument(
        "--population",
        type=int,
        default=300,
        help="Target active population (default: 300).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker threads for the weekly fight batch (default: 1).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log weekly stage details.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.weeks < 1:
        raise SystemExit("--weeks must be >= 1")
    if args.population < 10:
        raise SystemExit("--population must be >= 10")
    if args.workers < 1:
        raise SystemExit("--workers must be >= 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    universe, samples = simulate_universe(
        args.seed,
        weeks=args.weeks,
        population=args.population,
        workers=args.workers,
    )

    print(
        "Universe pacing simulation with aging, matchmaking, rankings, and retirement.\n"
        f"Seed: {args.seed} | weeks: {args.weeks} | workers: {args.workers}"
    )
    _print_report(universe, summarize(universe, samples))


if __name__ == "__main__":
    main()
