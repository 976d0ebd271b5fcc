#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sample scorecard: full dashboard pass

Runs the engine over scorecard.json, saves the JSON result and the Excel
report next to this script.
"""

import json
import logging
import sys
from pathlib import Path

# Repository root on the path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from bsc_tools import build_dashboard
from bsc_tools.io import export_dashboard

SCRIPT_DIR = Path(__file__).parent


def load_data():
    return json.loads((SCRIPT_DIR / "scorecard.json").read_text(encoding="utf-8"))


def save_json(data, filename):
    filepath = SCRIPT_DIR / filename
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    print(f"  ✓ Saved: {filename}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - [%(levelname)s] - %(name)s - %(message)s")

    print("=" * 60)
    print("Sample scorecard")
    print("=" * 60)

    result = build_dashboard(load_data())

    for p in result["perspectives"]:
        print(f"  {p['name']:<28} total={p['total']:<3} {p['percent_of_grand']:>6.2f}%  {p['tier']}")
    print(f"\n  Balance: {result['balance']['recommendation_text']}")

    save_json(result, "dashboard.json")
    export_dashboard(result, SCRIPT_DIR / "dashboard.xlsx")
    print("  ✓ Saved: dashboard.xlsx")


if __name__ == "__main__":
    main()
