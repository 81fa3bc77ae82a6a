"""Offline statistics harness over an exported dining-journal snapshot.

Usage:
  python eval/run_stats.py --restaurants export/restaurants.json --visits export/visits.jsonl --year 2024 --out eval/report_v1
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from loguru import logger

SRC = Path(__file__).resolve().parents[1] / "backend" / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from config import Configuration  # noqa: E402
from services.engine import StatsEngine  # noqa: E402
from services.report import build_report  # noqa: E402


def load_rows(path: Path) -> list[dict[str, Any]]:
    """Read a JSON array or a JSONL file of rows."""
    with path.open('r', encoding='utf-8') as fh:
        if path.suffix == '.jsonl':
            return [json.loads(line) for line in fh if line.strip()]
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f'{path} must contain a JSON array')
    return data


def main() -> None:
    parser = argparse.ArgumentParser(description='Compute dining statistics for an exported snapshot')
    parser.add_argument('--restaurants', required=True, help='Restaurants JSON/JSONL path')
    parser.add_argument('--visits', required=True, help='Visits JSON/JSONL path')
    parser.add_argument('--year', type=int, help='Restrict to one calendar year (default: all time)')
    parser.add_argument('--out', default='eval/report_v1', help='Output directory for reports')
    parser.add_argument('--env', default='backend/.env', help='Optional .env file with STATS_* settings')
    args = parser.parse_args()

    load_dotenv(args.env)
    cfg = Configuration.from_env()
    logger.info('cfg: {}', cfg.log_summary())

    restaurants_path = Path(args.restaurants)
    visits_path = Path(args.visits)
    for path in (restaurants_path, visits_path):
        if not path.exists():
            raise FileNotFoundError(f'snapshot file not found: {path}')

    restaurants = load_rows(restaurants_path)
    visits = load_rows(visits_path)
    engine = StatsEngine(cfg)

    result = engine.compute(restaurants, visits, args.year if args.year is not None else 'all')
    comparison = None
    if args.year is not None:
        comparison = engine.compare(args.year, restaurants, visits)

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    report_path = out_dir / 'report.md'
    report_path.write_text(build_report(result, comparison, engine.tz) + '\n', encoding='utf-8')

    summary_path = out_dir / 'summary.json'
    with summary_path.open('w', encoding='utf-8') as fh:
        json.dump(
            {'stats': asdict(result), 'comparison': asdict(comparison) if comparison else None},
            fh,
            ensure_ascii=False,
            indent=2,
            default=str,
        )

    years_path = out_dir / 'years.csv'
    with years_path.open('w', newline='', encoding='utf-8') as fh:
        writer = csv.writer(fh)
        writer.writerow(['year', 'visits', 'total_spent_eur', 'avg_per_cover_eur', 'average_rating', 'badge'])
        for year in sorted(result.available_years):
            yearly = engine.compute(restaurants, visits, year)
            writer.writerow([
                year,
                yearly.visit_count,
                f'{yearly.total_spent:.1f}',
                '' if yearly.average_per_cover is None else f'{yearly.average_per_cover:.1f}',
                f'{yearly.average_rating:.1f}',
                yearly.badge.label if yearly.badge else '',
            ])

    logger.info(
        'period={} restaurants={} visits={} years={}',
        result.period,
        result.total_restaurants,
        result.visit_count,
        ','.join(str(y) for y in result.available_years) or 'none',
    )
    print(f'Statistics written to {report_path}, {summary_path} and {years_path}')


if __name__ == '__main__':
    main()
