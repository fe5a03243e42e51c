#!/usr/bin/env python3
"""
HLM Pass Script
===============

Runs one HLM pass over a JSON snapshot of knowledge units and prints
the result.

Usage:
    # Summary only
    python scripts/run_hlm_pass.py snapshot.json

    # Full pass record
    python scripts/run_hlm_pass.py snapshot.json --full

    # Summary plus the 10 highest-priority recommendations
    python scripts/run_hlm_pass.py snapshot.json --top 10

The snapshot is either a list of units or an object holding the list
under "dtus" or "units". Engine settings come from HLM_* environment
variables (see config/settings.py).
"""

import asyncio
import argparse
import json
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import get_settings
from hlm.engine import HLMEngine

logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)


def load_snapshot(path: str):
    """Read a snapshot file; unwrap {"dtus": [...]} / {"units": [...]}."""
    with open(path, encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        for key in ('dtus', 'units'):
            if key in data:
                return data[key]
    return data


async def main():
    parser = argparse.ArgumentParser(description="Run one HLM topology pass over a unit snapshot")
    parser.add_argument('snapshot', help="Path to a JSON snapshot of knowledge units")
    parser.add_argument('--full', action='store_true', help="Print the full pass record")
    parser.add_argument('--top', type=int, default=0, help="Also list the top N recommendations")
    args = parser.parse_args()

    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    try:
        units = load_snapshot(args.snapshot)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read snapshot {args.snapshot}: {e}")
        sys.exit(1)

    engine = HLMEngine(settings=settings)
    record = await engine.run_pass_async(units)

    if not record.ok:
        logger.error(f"Pass failed: {record.error}")
        sys.exit(1)

    output = record.to_dict() if args.full else {
        "pass_id": record.pass_id,
        "duration_seconds": round(record.duration_seconds, 3),
        "summary": record.summary.to_dict(),
    }
    if args.top > 0:
        output["top_recommendations"] = [
            r.to_dict() for r in engine.list_recommendations(limit=args.top)
        ]

    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    asyncio.run(main())
