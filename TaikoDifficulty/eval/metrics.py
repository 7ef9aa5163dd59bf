"""
Evaluation Metrics for TaikoDifficulty

Measures how well computed star ratings track charted levels:
- Star rating agreement (error and rank correlation)
- Within-song monotonicity across difficulties
"""

from dataclasses import dataclass, field

import numpy as np
from scipy.stats import kendalltau, spearmanr

from ..constants import DIFFICULTY_ORDER


@dataclass
class StarMetrics:
    """
    Agreement between computed star ratings and charted levels.

    Charted levels and star ratings live on different scales, so rank
    correlations are the primary signal; MAE/RMSE are reported after an
    optional linear fit of ratings onto levels.
    """

    fit_linear: bool = True

    def compute(self, predictions: np.ndarray, targets: np.ndarray) -> dict:
        """
        Compute star agreement metrics.

        Args:
            predictions: Computed star ratings [N]
            targets: Charted levels [N]

        Returns:
            Dict with all metrics
        """
        predictions = np.asarray(predictions, dtype=np.float64)
        targets = np.asarray(targets, dtype=np.float64)
        if len(predictions) == 0:
            raise ValueError("StarMetrics needs at least one sample")

        metrics = {"count": len(predictions)}

        mapped = predictions
        if self.fit_linear and len(predictions) > 1 and np.ptp(predictions) > 0:
            slope, intercept = np.polyfit(predictions, targets, 1)
            mapped = slope * predictions + intercept
            metrics["fit_slope"] = float(slope)
            metrics["fit_intercept"] = float(intercept)

        metrics["mae"] = float(np.abs(mapped - targets).mean())
        metrics["rmse"] = float(np.sqrt(((mapped - targets) ** 2).mean()))

        if len(predictions) > 1:
            rho, p_value = spearmanr(predictions, targets)
            tau, _ = kendalltau(predictions, targets)
            metrics["spearman_rho"] = 0.0 if np.isnan(rho) else float(rho)
            metrics["spearman_pvalue"] = 1.0 if np.isnan(p_value) else float(p_value)
            metrics["kendall_tau"] = 0.0 if np.isnan(tau) else float(tau)
        else:
            metrics["spearman_rho"] = 0.0
            metrics["spearman_pvalue"] = 1.0
            metrics["kendall_tau"] = 0.0

        return metrics


@dataclass
class MonotonicityMetrics:
    """
    Metrics for within-song monotonicity.

    Checks that harder difficulties get higher star ratings within the
    same song.
    """

    difficulty_order: dict = field(default_factory=lambda: dict(DIFFICULTY_ORDER))

    def compute(
        self,
        ratings: np.ndarray,
        song_ids: list[str],
        difficulties: list[str],
    ) -> dict:
        """
        Compute monotonicity metrics.

        Args:
            ratings: Star ratings [N]
            song_ids: Song identifiers
            difficulties: Difficulty names

        Returns:
            Dict with metrics
        """
        # Group by song
        song_groups: dict[str, list] = {}
        for i, song_id in enumerate(song_ids):
            song_groups.setdefault(song_id, []).append(
                (self.difficulty_order.get(difficulties[i], 0), float(ratings[i]))
            )

        n_violations = 0
        n_pairs = 0
        violation_margins = []
        per_song_kendall_tau = []

        for charts in song_groups.values():
            if len(charts) < 2:
                continue

            charts.sort(key=lambda c: c[0])
            scores = [score for _, score in charts]

            # Adjacent pairs only
            for easier, harder in zip(scores, scores[1:]):
                n_pairs += 1
                if easier >= harder:
                    n_violations += 1
                    violation_margins.append(easier - harder)

            tau, _ = kendalltau(scores, list(range(len(scores))))
            if not np.isnan(tau):
                per_song_kendall_tau.append(tau)

        metrics = {
            "n_pairs": n_pairs,
            "n_violations": n_violations,
            "violation_rate": n_violations / n_pairs if n_pairs > 0 else 0.0,
        }

        if violation_margins:
            metrics["mean_violation_margin"] = float(np.mean(violation_margins))
            metrics["max_violation_margin"] = float(np.max(violation_margins))
        else:
            metrics["mean_violation_margin"] = 0.0
            metrics["max_violation_margin"] = 0.0

        if per_song_kendall_tau:
            metrics["mean_kendall_tau_within_song"] = float(
                np.mean(per_song_kendall_tau)
            )
            metrics["min_kendall_tau_within_song"] = float(
                np.min(per_song_kendall_tau)
            )
        else:
            metrics["mean_kendall_tau_within_song"] = 0.0
            metrics["min_kendall_tau_within_song"] = 0.0

        return metrics
