#!/usr/bin/env python3
"""
TREND REPORT
============
Runs the trend engine or the EV report against a pick source and prints the
result as JSON for whatever renders it (bot embeds, dashboards, exports).

Input:  a JSON export of the picks table (--file) or the configured database (--db)
Output: AnalysisSummary / EVSummary / leaderboard as JSON on stdout

Usage:
    python scripts/trend_report.py trends --file data/picks.json
    python scripts/trend_report.py trends --db --days 14 --sport nba --threshold 0.6
    python scripts/trend_report.py ev --file data/picks.json --range week
    python scripts/trend_report.py leaderboard --db --range month --limit 5
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from analysis.data_loader import DataLoader
from analysis.sources import PickSource
from config import get_settings
from engine.ev_report import EVReportService, TIME_RANGES
from engine.trend_engine import TrendAnalysisEngine


def build_source(args: argparse.Namespace) -> PickSource:
    if args.db:
        from database import PickRepository
        return PickRepository()
    return DataLoader(args.file)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Pick trend and EV analytics")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_source_args(p: argparse.ArgumentParser):
        group = p.add_mutually_exclusive_group()
        group.add_argument("--file", default="data/picks.json", help="JSON export of picks")
        group.add_argument("--db", action="store_true", help="Read from DATABASE_URL")

    trends = sub.add_parser("trends", help="Streaks, trend breaks, outliers, regression")
    add_source_args(trends)
    trends.add_argument("--days", type=int, default=settings.DAYS_BACK)
    trends.add_argument("--min-sample", type=int, default=settings.MIN_SAMPLE_SIZE)
    trends.add_argument("--threshold", type=float, default=settings.CONFIDENCE_THRESHOLD)
    trends.add_argument("--sport", default=settings.SPORT_FILTER)

    ev = sub.add_parser("ev", help="EV summary for a time range")
    add_source_args(ev)
    ev.add_argument("--range", choices=TIME_RANGES, default="week")

    board = sub.add_parser("leaderboard", help="Owners ranked by average EV")
    add_source_args(board)
    board.add_argument("--range", choices=TIME_RANGES, default="week")
    board.add_argument("--limit", type=int, default=10)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log_level = get_settings().LOG_LEVEL
    logging.basicConfig(level=log_level)
    logger.remove()
    logger.add(sys.stderr, level=log_level)

    source = build_source(args)

    if args.command == "trends":
        if not 0.0 <= args.threshold <= 1.0:
            logger.error("--threshold must be between 0 and 1")
            return 2
        engine = TrendAnalysisEngine(source)
        result = engine.perform_trend_analysis(
            days_back=args.days,
            min_sample_size=args.min_sample,
            confidence_threshold=args.threshold,
            sport_filter=args.sport,
        ).to_dict()
    elif args.command == "ev":
        service = EVReportService(source)
        result = service.get_ev_summary(start=service.start_date_for_range(args.range)).to_dict()
    else:
        service = EVReportService(source)
        result = [u.to_dict() for u in service.get_user_ev_leaderboard(args.range, limit=args.limit)]

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
