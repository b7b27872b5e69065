"""Parallel execution of independent billing and settlement jobs.

Jobs are pure and share no state, so they are split across a
``multiprocessing`` pool without locking. Output order matches input order.
"""

from __future__ import annotations

import logging
import multiprocessing as mp
import time
from collections.abc import Callable, Sequence
from typing import TypeVar

from tenancy_engine.models import CommunalCalculation, SettlementResult
from tenancy_engine.settlement.jobs import (
    BillingJob,
    SettlementJob,
    run_billing_job,
    run_settlement_job,
)

logger = logging.getLogger(__name__)

J = TypeVar("J")
R = TypeVar("R")


def run_jobs(
    func: Callable[[J], R],
    jobs: Sequence[J],
    workers: int = 1,
    chunksize: int = 16,
) -> list[R]:
    """Apply ``func`` to every job, in-process or across a worker pool.

    Parameters
    ----------
    func : Callable[[J], R]
        Module-level job function (must be picklable).
    jobs : Sequence[J]
        Jobs to run.
    workers : int
        Worker processes; ``<= 1`` runs in the calling process.
    chunksize : int
        Jobs handed to a worker at a time.

    Returns
    -------
    list[R]
        Results in job order.
    """
    t0 = time.perf_counter()
    if workers <= 1 or len(jobs) <= 1:
        results = [func(job) for job in jobs]
    else:
        with mp.Pool(processes=workers) as pool:
            results = pool.map(func, jobs, chunksize=max(1, chunksize))
    logger.info(
        "Ran %d %s jobs with %d worker(s) in %.2fs",
        len(jobs),
        getattr(func, "__name__", "batch"),
        max(1, workers),
        time.perf_counter() - t0,
        extra={"job_count": len(jobs)},
    )
    return results


def run_billing_batch(
    jobs: Sequence[BillingJob], workers: int = 1, chunksize: int = 16
) -> list[CommunalCalculation]:
    return run_jobs(run_billing_job, jobs, workers, chunksize)


def run_settlement_batch(
    jobs: Sequence[SettlementJob], workers: int = 1, chunksize: int = 16
) -> list[SettlementResult]:
    return run_jobs(run_settlement_job, jobs, workers, chunksize)
