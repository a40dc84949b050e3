"""
Eval script for checking keyword routing, purchase intent scoring, reply quality scoring and scorer latency.

Usage: python -m evaluation.evaluate_heuristics --mode quick
"""
import os
import json
import time
import logging
import argparse
from pathlib import Path
from typing import List, Dict, Any
from datetime import datetime
import pandas as pd

from assistant.keywords import KEYWORD_RULES, find_rule
from assistant.scoring import analyze_purchase_intent, analyze_response_quality
from evaluation.metrics import (
    aggregate_metrics,
    confusion_matrix_metrics,
    within_bounds,
)

logger = logging.getLogger(__name__)

DEFAULT_GOLDEN_PATH = str(Path(__file__).parent / "datasets" / "golden_messages.json")
NO_RULE = "none"
LIKELIHOOD_LABELS = ["Low", "Medium", "High"]
QUALITY_FIELDS = ["accuracy", "tone", "safety", "confidence"]


class HeuristicsEvaluator:
    def __init__(self, golden_path: str = DEFAULT_GOLDEN_PATH):
        logger.info("Loading golden messages from %s", golden_path)
        with open(golden_path, 'r', encoding='utf-8') as f:
            self.golden_data = json.load(f)
        self.golden_path = golden_path

        self.results = {}
        self.start_time = None
        self.end_time = None

    def evaluate_keyword_routing(self) -> Dict[str, Any]:
        """
        Check which keyword rule (if any) answers each golden message.

        Returns:
            Dict with accuracy, per-rule metrics and confusion matrix
        """
        cases = self.golden_data.get("keyword_routing", [])
        y_true, y_pred = [], []
        failures = []

        for case in cases:
            rule = find_rule(case["message"])
            predicted = rule.tag if rule else NO_RULE
            y_true.append(case["expected_rule"])
            y_pred.append(predicted)
            if predicted != case["expected_rule"]:
                failures.append({"case_id": case["case_id"], "expected": case["expected_rule"], "predicted": predicted})
                logger.info("[%s] expected %s, got %s", case["case_id"], case["expected_rule"], predicted)

        labels = [r.tag for r in KEYWORD_RULES] + [NO_RULE]
        confusion = confusion_matrix_metrics(y_true, y_pred, labels)

        return {
            "accuracy": confusion.get("accuracy", 0.0),
            "per_class": confusion.get("per_class", {}),
            "confusion_matrix": confusion.get("confusion_matrix", []),
            "labels": labels,
            "failures": failures,
            "test_cases": len(cases)
        }

    def evaluate_intent_scoring(self) -> Dict[str, Any]:
        """
        Compare predicted purchase likelihood (and score when given) with the golden labels.

        Returns:
            Dict with likelihood accuracy, exact score accuracy and confusion matrix
        """
        cases = self.golden_data.get("intent_scoring", [])
        y_true, y_pred = [], []
        score_checks = []
        failures = []

        for case in cases:
            intent = analyze_purchase_intent(case["message"])
            y_true.append(case["expected_likelihood"])
            y_pred.append(intent.likelihood)
            score_ok = True
            if "expected_score" in case:
                score_ok = intent.score == case["expected_score"]
                score_checks.append(score_ok)
            if intent.likelihood != case["expected_likelihood"] or not score_ok:
                failures.append({
                    "case_id": case["case_id"],
                    "expected": case["expected_likelihood"],
                    "predicted": intent.likelihood,
                    "score": intent.score,
                })

        confusion = confusion_matrix_metrics(y_true, y_pred, LIKELIHOOD_LABELS)

        return {
            "accuracy": confusion.get("accuracy", 0.0),
            "score_accuracy": (sum(score_checks) / len(score_checks)) if score_checks else 1.0,
            "per_class": confusion.get("per_class", {}),
            "confusion_matrix": confusion.get("confusion_matrix", []),
            "labels": LIKELIHOOD_LABELS,
            "failures": failures,
            "test_cases": len(cases)
        }

    def evaluate_quality_scoring(self) -> Dict[str, Any]:
        """
        Score golden replies and check every metric against its expected bounds.

        Returns:
            Dict with pass rate, aggregated scores and per-case detail
        """
        cases = self.golden_data.get("quality_scoring", [])
        per_case = []
        all_scores = []
        passed = 0

        for case in cases:
            metrics = analyze_response_quality(case["reply"]).model_dump()
            all_scores.append(metrics)
            expected = case.get("expected", {})
            violations = [
                field for field in QUALITY_FIELDS
                if not within_bounds(metrics[field], expected.get(field))
            ]
            if not violations:
                passed += 1
            per_case.append({"case_id": case["case_id"], "scores": metrics, "violations": violations})

        return {
            "pass_rate": passed / len(cases) if cases else 1.0,
            "aggregated": aggregate_metrics(all_scores),
            "per_case": per_case,
            "test_cases": len(cases)
        }

    def benchmark_performance(self, num_iterations: int = 200) -> Dict[str, Any]:
        """
        Benchmark keyword gate plus both scorers on the golden messages.

        Args:
            num_iterations: Number of scoring iterations to run

        Returns:
            Dict with latency percentiles and throughput
        """
        messages = [c["message"] for c in self.golden_data.get("intent_scoring", [])]
        replies = [c["reply"] for c in self.golden_data.get("quality_scoring", [])]
        if not messages or not replies:
            return {"num_iterations": 0}

        latencies = []
        for i in range(num_iterations):
            message = messages[i % len(messages)]
            reply = replies[i % len(replies)]
            start = time.perf_counter()
            find_rule(message)
            analyze_purchase_intent(message)
            analyze_response_quality(reply)
            latencies.append((time.perf_counter() - start) * 1000)  # ms

        latencies_series = pd.Series(latencies)
        mean = float(latencies_series.mean())

        return {
            "mean_latency_ms": mean,
            "std_latency_ms": float(latencies_series.std()),
            "p50_latency_ms": float(latencies_series.quantile(0.50)),
            "p95_latency_ms": float(latencies_series.quantile(0.95)),
            "p99_latency_ms": float(latencies_series.quantile(0.99)),
            "min_latency_ms": float(latencies_series.min()),
            "max_latency_ms": float(latencies_series.max()),
            "throughput_qps": 1000.0 / mean if mean > 0 else 0.0,
            "num_iterations": num_iterations
        }

    def run_mode(self, mode: str) -> Dict[str, Any]:
        """Run the sections for a mode and attach metadata."""
        self.start_time = datetime.now()
        sections = MODES.get(mode)
        if sections is None:
            raise ValueError(f"Unknown mode: {mode}")

        results: Dict[str, Any] = {}
        for name in sections:
            try:
                results[name] = getattr(self, SECTION_METHODS[name])()
            except Exception as e:
                logger.exception("Error in %s evaluation", name)
                results[name] = {"error": str(e)}

        self.end_time = datetime.now()
        results["metadata"] = {
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration_seconds": (self.end_time - self.start_time).total_seconds(),
            "golden_path": self.golden_path,
            "mode": mode
        }
        self.results = results
        return results

    def run_all_evaluations(self) -> Dict[str, Any]:
        return self.run_mode("all")

    def save_results(self, output_path: str = "evaluation/results/latest.json"):
        """
        Save evaluation results to JSON, plus a timestamped copy when writing latest.json.

        Args:
            output_path: Path to save results
        """
        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(self.results, f, indent=2)
        logger.info("Results saved to %s", output_path)

        if output_path.endswith("latest.json"):
            timestamp_obj = self.start_time if self.start_time else datetime.now()
            timestamp = timestamp_obj.strftime('%Y%m%d_%H%M%S')
            timestamped_path = output_path.replace("latest.json", f"eval_{timestamp}.json")
            with open(timestamped_path, 'w', encoding='utf-8') as f:
                json.dump(self.results, f, indent=2)
            logger.info("Timestamped results saved to %s", timestamped_path)


SECTION_METHODS = {
    "keyword_routing": "evaluate_keyword_routing",
    "intent_scoring": "evaluate_intent_scoring",
    "quality_scoring": "evaluate_quality_scoring",
    "performance": "benchmark_performance",
}

MODES = {
    "all": ["keyword_routing", "intent_scoring", "quality_scoring", "performance"],
    "quick": ["keyword_routing", "intent_scoring"],
    "keywords": ["keyword_routing"],
    "intent": ["intent_scoring"],
    "quality": ["quality_scoring"],
    "performance": ["performance"],
}


def main():
    parser = argparse.ArgumentParser(description="Evaluate AI Shopping Assistant heuristics")
    parser.add_argument("--mode", type=str, default="all", choices=list(MODES),
                       help="Evaluation mode to run")
    parser.add_argument("--golden", type=str, default=DEFAULT_GOLDEN_PATH,
                       help="Path to golden messages JSON")
    parser.add_argument("--output", type=str,
                       default="evaluation/results/latest.json",
                       help="Path to save results JSON")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    evaluator = HeuristicsEvaluator(golden_path=args.golden)
    results = evaluator.run_mode(args.mode)
    evaluator.save_results(args.output)

    for name in MODES[args.mode]:
        section = results.get(name, {})
        headline = {k: section[k] for k in ("accuracy", "score_accuracy", "pass_rate", "p95_latency_ms") if k in section}
        logger.info("%s: %s", name, headline or section.get("error"))


if __name__ == "__main__":
    main()
