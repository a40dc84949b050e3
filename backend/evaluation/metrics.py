"""Standard classification metrics for eval"""
from typing import List, Dict, Any, Optional, Tuple
import numpy as np
from collections import defaultdict


def accuracy(y_true: List[str], y_pred: List[str]) -> float:
    """Fraction of predictions equal to the expected label"""
    if not y_true or len(y_true) != len(y_pred):
        return 0.0
    return sum(1 for t, p in zip(y_true, y_pred) if t == p) / len(y_true)


def within_bounds(value: float, bounds: Optional[Tuple[Optional[float], Optional[float]]]) -> bool:
    """Check value against an inclusive (low, high) pair, None means open"""
    if not bounds:
        return True
    low, high = bounds
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def aggregate_metrics(all_case_metrics: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Aggregate numeric results across cases"""
    if not all_case_metrics:
        return {}

    metric_values = defaultdict(list)
    for case_metrics in all_case_metrics:
        for metric_name, value in case_metrics.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                metric_values[metric_name].append(value)

    aggregated = {}
    for metric_name, values in metric_values.items():
        values_array = np.array(values, dtype=float)
        aggregated[metric_name] = {
            "mean": float(np.mean(values_array)),
            "std": float(np.std(values_array)),
            "min": float(np.min(values_array)),
            "max": float(np.max(values_array)),
            "median": float(np.median(values_array)),
        }

    return aggregated


def confusion_matrix_metrics(y_true: List[str], y_pred: List[str],
                             labels: List[str]) -> Dict[str, Any]:
    """Confusion matrix + per-class metrics for classification"""
    if not y_true or not y_pred or len(y_true) != len(y_pred):
        return {}

    label_to_idx = {label: i for i, label in enumerate(labels)}
    n = len(labels)
    conf_matrix = np.zeros((n, n), dtype=int)

    for true_label, pred_label in zip(y_true, y_pred):
        if true_label in label_to_idx and pred_label in label_to_idx:
            i = label_to_idx[true_label]
            j = label_to_idx[pred_label]
            conf_matrix[i, j] += 1

    per_class = {}
    for i, label in enumerate(labels):
        tp = int(conf_matrix[i, i])
        fp = int(conf_matrix[:, i].sum()) - tp
        fn = int(conf_matrix[i, :].sum()) - tp

        precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
        recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
        f1 = 2 * precision * recall / (precision + recall) if (precision + recall) > 0 else 0.0

        per_class[label] = {
            "precision": precision,
            "recall": recall,
            "f1": f1,
            "support": int(conf_matrix[i, :].sum())
        }

    return {
        "accuracy": accuracy(y_true, y_pred),
        "confusion_matrix": conf_matrix.tolist(),
        "per_class": per_class,
        "labels": labels
    }
