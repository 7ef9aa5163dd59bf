"""
Evaluator for TaikoDifficulty

Rates a corpus of labelled charts and reports how the star ratings relate
to the charted levels.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
from tqdm import tqdm

from ..calculator import TaikoDifficultyCalculator
from ..data.record import ChartRecord
from .metrics import MonotonicityMetrics, StarMetrics

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Corpus-level evaluator for the star rating.

    Runs the calculator over every chart and computes agreement and
    monotonicity metrics.
    """

    def __init__(
        self,
        calculator: Optional[TaikoDifficultyCalculator] = None,
        show_progress: bool = True,
    ):
        self.calculator = calculator or TaikoDifficultyCalculator()
        self.show_progress = show_progress

        self.star_metrics = StarMetrics()
        self.monotonicity_metrics = MonotonicityMetrics()

    def run_inference(self, records: Iterable[ChartRecord]) -> dict:
        """
        Rate every chart and collect results.

        Returns:
            Dict of per-chart arrays and lists
        """
        results = {
            "star_rating": [],
            "level": [],
            "song_ids": [],
            "difficulties": [],
            "attributes": [],
        }

        for record in tqdm(
            records, desc="Rating charts", disable=not self.show_progress
        ):
            attributes = self.calculator.calculate(
                record.events,
                record.mods,
                overall_difficulty=record.overall_difficulty,
                is_convert=record.is_convert,
            )

            results["star_rating"].append(attributes.star_rating)
            results["level"].append(
                np.nan if record.level is None else float(record.level)
            )
            results["song_ids"].append(record.song_id)
            results["difficulties"].append(record.difficulty)
            results["attributes"].append(attributes.to_dict())

        results["star_rating"] = np.array(results["star_rating"], dtype=np.float64)
        results["level"] = np.array(results["level"], dtype=np.float64)

        return results

    def compute_all_metrics(self, results: dict) -> dict:
        """
        Compute all metrics from rating results.

        Charts without a level are left out of star agreement metrics.
        """
        all_metrics = {}

        labelled = ~np.isnan(results["level"])
        if labelled.any():
            all_metrics["star"] = self.star_metrics.compute(
                results["star_rating"][labelled],
                results["level"][labelled],
            )
        else:
            logger.warning("No charted levels available, skipping star metrics")

        all_metrics["monotonicity"] = self.monotonicity_metrics.compute(
            results["star_rating"],
            results["song_ids"],
            results["difficulties"],
        )

        ratings = results["star_rating"]
        all_metrics["distribution"] = {
            "count": int(len(ratings)),
            "mean": float(ratings.mean()) if len(ratings) else 0.0,
            "std": float(ratings.std()) if len(ratings) else 0.0,
            "min": float(ratings.min()) if len(ratings) else 0.0,
            "max": float(ratings.max()) if len(ratings) else 0.0,
        }

        return all_metrics

    def generate_report(
        self,
        metrics: dict,
        output_path: Optional[Path] = None,
    ) -> str:
        """
        Generate a human-readable report from metrics.

        Returns:
            Report as markdown string
        """
        lines = []
        lines.append("# TaikoDifficulty Evaluation Report")
        lines.append(f"\nGenerated: {datetime.now().isoformat()}")
        lines.append(f"Rating version: {self.calculator.version}\n")

        dist = metrics.get("distribution", {})
        lines.append("## Star Rating Distribution")
        lines.append("")
        lines.append(f"- **Charts**: {dist.get('count', 0)}")
        lines.append(f"- **Mean**: {dist.get('mean', 0):.4f}")
        lines.append(f"- **Std**: {dist.get('std', 0):.4f}")
        lines.append(
            f"- **Range**: {dist.get('min', 0):.4f} - {dist.get('max', 0):.4f}"
        )
        lines.append("")

        if "star" in metrics:
            s_metrics = metrics["star"]
            lines.append("## Agreement with Charted Levels")
            lines.append("")
            lines.append(f"- **Spearman ρ**: {s_metrics.get('spearman_rho', 0):.4f}")
            lines.append(f"- **Kendall τ**: {s_metrics.get('kendall_tau', 0):.4f}")
            lines.append(f"- **MAE (fitted)**: {s_metrics.get('mae', 0):.4f}")
            lines.append(f"- **RMSE (fitted)**: {s_metrics.get('rmse', 0):.4f}")
            lines.append("")

        m_metrics = metrics.get("monotonicity", {})
        lines.append("## Within-Song Monotonicity")
        lines.append("")
        lines.append(
            f"- **Violation Rate**: {m_metrics.get('violation_rate', 0):.4f} ({m_metrics.get('n_violations', 0)}/{m_metrics.get('n_pairs', 0)} pairs)"
        )
        lines.append(
            f"- **Mean Violation Margin**: {m_metrics.get('mean_violation_margin', 0):.4f}"
        )
        lines.append(
            f"- **Mean Kendall τ (within-song)**: {m_metrics.get('mean_kendall_tau_within_song', 0):.4f}"
        )
        lines.append("")

        report = "\n".join(lines)

        if output_path:
            output_path.write_text(report, encoding="utf-8")

        return report

    def evaluate(
        self,
        records: Iterable[ChartRecord],
        output_dir: Optional[Path] = None,
    ) -> dict:
        """
        Run full evaluation pipeline.

        Args:
            records: Charts to rate
            output_dir: Where to write metrics.json and report.md (optional)

        Returns:
            Dict with all metrics
        """
        results = self.run_inference(records)
        metrics = self.compute_all_metrics(results)

        if output_dir:
            output_dir = Path(output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)

            with open(output_dir / "metrics.json", "w", encoding="utf-8") as f:
                json.dump(metrics, f, indent=2)

            self.generate_report(metrics, output_dir / "report.md")
            logger.info("Evaluation written to %s", output_dir)

        return metrics
