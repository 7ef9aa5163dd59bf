import json

import numpy as np
import pytest
from conftest import alternating, make_events

from TaikoDifficulty import ChartRecord
from TaikoDifficulty.eval import Evaluator, MonotonicityMetrics, StarMetrics


def test_star_metrics_perfect_ranking():
    predictions = np.array([1.0, 2.5, 3.0, 4.2, 6.0])
    targets = np.array([2, 4, 5, 7, 9])

    metrics = StarMetrics().compute(predictions, targets)

    assert metrics["count"] == 5
    assert metrics["spearman_rho"] == pytest.approx(1.0)
    assert metrics["kendall_tau"] == pytest.approx(1.0)
    assert metrics["mae"] >= 0
    assert "fit_slope" in metrics


def test_star_metrics_linear_fit_removes_scale():
    predictions = np.array([1.0, 2.0, 3.0, 4.0])
    metrics = StarMetrics().compute(predictions, predictions * 2 + 1)

    assert metrics["fit_slope"] == pytest.approx(2.0)
    assert metrics["fit_intercept"] == pytest.approx(1.0)
    assert metrics["mae"] == pytest.approx(0.0, abs=1e-9)


def test_star_metrics_single_sample():
    metrics = StarMetrics().compute(np.array([3.0]), np.array([5.0]))
    assert metrics["spearman_rho"] == 0.0
    assert metrics["mae"] == 2.0


def test_star_metrics_requires_samples():
    with pytest.raises(ValueError):
        StarMetrics().compute(np.array([]), np.array([]))


def test_monotonicity_counts_adjacent_violations():
    ratings = np.array([1.0, 3.0, 2.0, 4.0, 5.0, 6.0])
    song_ids = ["a", "a", "a", "b", "b", "c"]
    difficulties = ["easy", "normal", "hard", "Oni", "ura", "oni"]

    metrics = MonotonicityMetrics().compute(ratings, song_ids, difficulties)

    # a: easy<normal ok, normal>hard violated; b: oni<ura ok; c alone
    assert metrics["n_pairs"] == 3
    assert metrics["n_violations"] == 1
    assert metrics["violation_rate"] == pytest.approx(1 / 3)
    assert metrics["max_violation_margin"] == pytest.approx(1.0)
    assert metrics["min_kendall_tau_within_song"] < 1.0


def test_evaluate_writes_outputs(tmp_path):
    records = [
        ChartRecord("song", "easy", make_events(alternating(20), interval=200.0), 3),
        ChartRecord("song", "oni", make_events(alternating(60), interval=80.0), 8),
        ChartRecord("other", "oni", make_events("dk"), None),
    ]

    metrics = Evaluator(show_progress=False).evaluate(records, tmp_path / "out")

    assert metrics["star"]["count"] == 2
    assert metrics["monotonicity"]["n_pairs"] == 1
    assert metrics["monotonicity"]["n_violations"] == 0
    assert metrics["distribution"]["count"] == 3
    assert metrics["distribution"]["min"] == 0.0

    saved = json.loads((tmp_path / "out" / "metrics.json").read_text())
    assert saved["monotonicity"] == metrics["monotonicity"]
    report = (tmp_path / "out" / "report.md").read_text(encoding="utf-8")
    assert "Within-Song Monotonicity" in report


def test_run_inference_marks_missing_levels():
    records = [ChartRecord("song", "oni", make_events("dkdkdk"))]
    results = Evaluator(show_progress=False).run_inference(records)

    assert np.isnan(results["level"][0])
    assert results["attributes"][0]["max_combo"] == 6
