"""
Batch runner for the alignment scoring engine.

This is the single entrypoint for scoring exported couple data.

Usage:
    python -m gamification.run --config configs/config.yaml \
        --responses data/responses.csv --history data/history.csv

The runner performs the following steps:
1. Load and validate configuration
2. Load and score session responses
3. Load score history and streak counters (optional)
4. Build a progress report per couple
5. Save couple scores (CSV) and reports (JSON)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import replace
from datetime import datetime
import json

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_scoring(
    config_path: str,
    responses_path: str,
    history_path: Optional[str] = None,
    streaks_path: Optional[str] = None,
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Score every couple in the exported data and write reports.

    Args:
        config_path: Path to the configuration YAML file
        responses_path: Path to the session responses CSV
        history_path: Path to the score history CSV (optional)
        streaks_path: Path to the streak counters CSV (optional)
        output_dir: If provided, write outputs here instead of config default

    Returns:
        Dictionary with run results and paths to outputs
    """
    from .configs import load_config, validate_config, get_config_value
    from .models import ScoreWeights
    from .compatibility import matrices_from_config
    from .analysis import build_streak_milestones
    from .data_loading import load_session_responses, load_score_history, load_streak_data, score_couples
    from .evaluation import DEFAULT_TARGET_SCORE, compute_score_distribution_stats, create_progress_report

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    logger.info("=" * 60)
    logger.info("ALIGNMENT SCORING RUN")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    try:
        weights = ScoreWeights.from_config(config)
    except ValueError as e:
        logger.warning(f"Invalid scoring.weights ({e}), using default weights")
        weights = ScoreWeights()
    matrices = matrices_from_config(config)

    target_score = get_config_value(config, "milestones.target_score", DEFAULT_TARGET_SCORE)
    if not isinstance(target_score, (int, float)) or not 0 <= target_score <= 100:
        logger.warning(f"Invalid milestones.target_score {target_score!r}, using {DEFAULT_TARGET_SCORE}")
        target_score = DEFAULT_TARGET_SCORE
    streak_targets = get_config_value(config, "milestones.streak_targets", []) or []

    effective_output_dir = Path(output_dir or get_config_value(config, "global.output_dir", "reports"))
    effective_output_dir.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # 2. Load and score responses
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 1: Scoring Responses")
    logger.info("=" * 60)

    responses = load_session_responses(responses_path, matrices=matrices)
    scores_df = score_couples(responses, weights)

    history = load_score_history(history_path) if history_path else {}
    streaks = load_streak_data(streaks_path) if streaks_path else {}

    # =========================================================================
    # 3. Build reports
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 2: Building Progress Reports")
    logger.info("=" * 60)

    reports = []
    for couple_id in scores_df.index:
        factors = scores_df.loc[couple_id].drop("overall_score").dropna().to_dict()
        streak = streaks.get(couple_id)
        if streak is not None and not streak.milestone_progress:
            streak = replace(
                streak, milestone_progress=build_streak_milestones(streak.longest_streak, streak_targets)
            )

        report = create_progress_report(
            couple_id=couple_id,
            factors=factors,
            history=history.get(couple_id, []),
            streak=streak,
            target_score=target_score,
            weights=weights,
        )
        reports.append(report)
        logger.debug("\n" + report.summary())

    # =========================================================================
    # 4. Save outputs
    # =========================================================================
    scores_path = effective_output_dir / "couple_scores.csv"
    scores_df.to_csv(scores_path)
    logger.info(f"Saved couple scores to {scores_path}")

    distribution = compute_score_distribution_stats(scores_df["overall_score"].to_numpy())
    output = {
        "run_timestamp": datetime.now().isoformat(),
        "config_path": config_path,
        "n_couples": len(reports),
        "score_distribution": distribution.to_dict(),
        "reports": [r.to_dict() for r in reports],
    }

    reports_path = effective_output_dir / "reports.json"
    with open(reports_path, "w") as f:
        json.dump(output, f, indent=2)
    logger.info(f"Saved {len(reports)} reports to {reports_path}")

    logger.info("\n" + "=" * 60)
    logger.info("RUN COMPLETE")
    logger.info("=" * 60)

    return {
        "success": True,
        "output_dir": str(effective_output_dir),
        "scores_path": str(scores_path),
        "reports_path": str(reports_path),
        "n_couples": len(reports),
    }


def main(argv=None):
    """Main entry point for the batch runner."""
    parser = argparse.ArgumentParser(
        description="Score couples' alignment sessions and write progress reports"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--responses",
        type=str,
        required=True,
        help="CSV of answered question pairs"
    )
    parser.add_argument(
        "--history",
        type=str,
        default=None,
        help="CSV of score history snapshots"
    )
    parser.add_argument(
        "--streaks",
        type=str,
        default=None,
        help="CSV of streak counters"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run_scoring(
            args.config,
            args.responses,
            history_path=args.history,
            streaks_path=args.streaks,
            output_dir=args.output_dir,
        )
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Scoring run failed: {e}")
        return 1

    logger.info(f"\nScored {result['n_couples']} couples")
    return 0


if __name__ == "__main__":
    sys.exit(main())
