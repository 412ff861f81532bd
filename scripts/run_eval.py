"""Run the urgency evaluation set against a running triage service.

Usage:
    python -m scripts.run_eval [--base-url http://localhost:8080] [--cases path.json]
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path

import httpx

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

DEFAULT_CASES = Path(__file__).parent / "data" / "eval_cases.json"


async def run_case(client: httpx.AsyncClient, case: dict) -> bool:
    logger.info("Case %s: %s", case["id"], case["description"])
    try:
        response = await client.post("/api/triage", json=case["input"])
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("  ERROR: %s", exc)
        return False

    expected = case["expectedUrgency"]
    if data.get("urgency") == expected:
        logger.info("  PASS: %s (via %s)", expected, data.get("providerUsed"))
        return True

    logger.info("  FAIL: expected %s, got %s", expected, data.get("urgency"))
    logger.info("  Red flags: %s", data.get("redFlags"))
    return False


async def main(base_url: str, cases_path: Path) -> int:
    cases = json.loads(cases_path.read_text(encoding="utf-8"))
    async with httpx.AsyncClient(base_url=base_url, timeout=60.0) as client:
        results = [await run_case(client, case) for case in cases]

    passed = sum(results)
    total = len(cases)
    logger.info("--- EVALUATION SUMMARY ---")
    logger.info("Total cases: %d", total)
    logger.info("Passed: %d", passed)
    logger.info("Failed: %d", total - passed)
    logger.info("Pass rate: %d%%", round(passed / total * 100) if total else 0)
    return 0 if passed == total else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--cases", type=Path, default=DEFAULT_CASES)
    args = parser.parse_args()
    raise SystemExit(asyncio.run(main(args.base_url, args.cases)))
