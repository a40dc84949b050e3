"""Eval API endpoints"""
from fastapi import APIRouter, BackgroundTasks, HTTPException
from pydantic import BaseModel
from typing import Optional, Dict, Any
import json
import logging
from pathlib import Path
from datetime import datetime
import uuid

from evaluation.evaluate_heuristics import DEFAULT_GOLDEN_PATH, MODES, HeuristicsEvaluator

router = APIRouter()
logger = logging.getLogger(__name__)

RESULTS_DIR = Path("evaluation/results")

_running_evals: Dict[str, Dict[str, Any]] = {}
MAX_TRACKED_JOBS = 50
FINISHED_STATUSES = ("completed", "failed")


class EvaluationRequest(BaseModel):
    # Jobs always run against the bundled golden dataset
    mode: str = "all"


class EvaluationStatus(BaseModel):
    job_id: str
    status: str
    mode: str
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    error: Optional[str] = None


def run_evaluation_task(job_id: str, mode: str, golden_path: str = DEFAULT_GOLDEN_PATH):
    """Run eval in background"""
    try:
        _running_evals[job_id]["status"] = "running"
        _running_evals[job_id]["started_at"] = datetime.now().isoformat()

        evaluator = HeuristicsEvaluator(golden_path=golden_path)
        evaluator.run_mode(mode)

        output_path = RESULTS_DIR / f"{job_id}.json"
        evaluator.save_results(str(output_path))
        evaluator.save_results(str(RESULTS_DIR / "latest.json"))

        _running_evals[job_id]["status"] = "completed"
        _running_evals[job_id]["completed_at"] = datetime.now().isoformat()
        _running_evals[job_id]["results_path"] = str(output_path)

    except Exception as e:
        logger.exception("Evaluation job %s failed", job_id)
        _running_evals[job_id]["status"] = "failed"
        _running_evals[job_id]["error"] = str(e)
        _running_evals[job_id]["completed_at"] = datetime.now().isoformat()


def _prune_finished_jobs():
    """Drop the oldest finished jobs so at most MAX_TRACKED_JOBS - 1 remain before a new one"""
    excess = len(_running_evals) - MAX_TRACKED_JOBS + 1
    if excess <= 0:
        return
    finished = [job_id for job_id, job in _running_evals.items() if job["status"] in FINISHED_STATUSES]
    for job_id in finished[:excess]:
        del _running_evals[job_id]


def _load_json(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


@router.post("/run", response_model=EvaluationStatus)
async def start_evaluation(request: EvaluationRequest, background_tasks: BackgroundTasks):
    """
    Start an evaluation job in the background.

    Returns job_id to track progress.
    """
    if request.mode not in MODES:
        raise HTTPException(status_code=400, detail=f"Unknown mode: {request.mode}")

    _prune_finished_jobs()
    job_id = str(uuid.uuid4())[:8]

    _running_evals[job_id] = {
        "job_id": job_id,
        "status": "pending",
        "mode": request.mode,
        "started_at": None,
        "completed_at": None,
        "error": None
    }

    background_tasks.add_task(
        run_evaluation_task,
        job_id,
        request.mode
    )

    return EvaluationStatus(**_running_evals[job_id])


@router.get("/status/{job_id}", response_model=EvaluationStatus)
async def get_evaluation_status(job_id: str):
    """Get status of evaluation job."""
    if job_id not in _running_evals:
        raise HTTPException(status_code=404, detail="Job not found")

    return EvaluationStatus(**_running_evals[job_id])


@router.get("/results/latest")
async def get_latest_results():
    """Get most recent evaluation results."""
    results_path = RESULTS_DIR / "latest.json"

    if not results_path.exists():
        raise HTTPException(status_code=404, detail="No evaluation results found. Run an evaluation first.")

    return _load_json(results_path)


@router.get("/results/{job_id}")
async def get_evaluation_results(job_id: str):
    """Get results of completed evaluation."""
    if job_id not in _running_evals:
        raise HTTPException(status_code=404, detail="Job not found")

    eval_data = _running_evals[job_id]

    if eval_data["status"] != "completed":
        raise HTTPException(status_code=400, detail=f"Evaluation not completed yet (status: {eval_data['status']})")

    results_path = eval_data.get("results_path")
    if not results_path or not Path(results_path).exists():
        raise HTTPException(status_code=404, detail="Results file not found")

    return _load_json(Path(results_path))


@router.get("/jobs")
async def list_evaluation_jobs():
    """List all evaluation jobs."""
    return {
        "jobs": list(_running_evals.values()),
        "count": len(_running_evals)
    }


@router.get("/summary")
async def get_evaluation_summary():
    """Get summary of latest evaluation for dashboard display."""
    results_path = RESULTS_DIR / "latest.json"

    if not results_path.exists():
        raise HTTPException(status_code=404, detail="No evaluation results found")

    results = _load_json(results_path)

    summary = {
        "metadata": results.get("metadata", {}),
        "key_metrics": {}
    }

    keywords = results.get("keyword_routing", {})
    if "accuracy" in keywords:
        summary["key_metrics"]["keyword_accuracy"] = keywords["accuracy"]

    intent = results.get("intent_scoring", {})
    if "accuracy" in intent:
        summary["key_metrics"]["intent_accuracy"] = intent["accuracy"]
        summary["key_metrics"]["intent_score_accuracy"] = intent.get("score_accuracy", 0)

    quality = results.get("quality_scoring", {})
    if "pass_rate" in quality:
        summary["key_metrics"]["quality_pass_rate"] = quality["pass_rate"]

    performance = results.get("performance", {})
    if "p95_latency_ms" in performance:
        summary["key_metrics"]["p95_latency_ms"] = performance["p95_latency_ms"]
        summary["key_metrics"]["throughput_qps"] = performance.get("throughput_qps", 0)

    return summary
