"""
Batch Processing System

Analyze many genes in parallel:
- One job per gene
- Worker pool execution
- Per-gene failure isolation
- Result aggregation
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import pandas as pd

from .analysis import AnalysisConfig, AnalysisContext, GeneAnalyzer, GeneResult
from .exceptions import ConfigurationError, GeneAnalysisError, TFBSNexusError
from .genomic_utils import counts_table

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Gene job execution status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class GeneJob:
    """Tracks the analysis of one gene."""

    gene_id: str
    status: JobStatus = JobStatus.PENDING
    created_at: str = ""
    started_at: str = ""
    completed_at: str = ""
    error: str = ""
    result: Optional[GeneResult] = None

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        d["result"] = self.result.to_dict() if self.result else None
        return d


@dataclass
class BatchResult:
    """Jobs and results of one batch run."""

    jobs: Dict[str, GeneJob] = field(default_factory=dict)

    @property
    def results(self) -> List[GeneResult]:
        return [j.result for j in self.jobs.values() if j.status == JobStatus.COMPLETED]

    @property
    def failed(self) -> List[GeneJob]:
        return [j for j in self.jobs.values() if j.status == JobStatus.FAILED]

    def get_queue_status(self) -> Dict[str, int]:
        """Get counts by status."""
        status_counts = {s.value: 0 for s in JobStatus}
        for job in self.jobs.values():
            status_counts[job.status.value] += 1
        return status_counts

    def counts_table(self) -> pd.DataFrame:
        """Per gene and TF site counts over all completed genes."""
        return counts_table(s for r in self.results for s in r.sites)


class BatchProcessor:
    """
    Run a per-gene analysis over many genes with a worker pool.

    Genes are independent: a configuration error in one gene fails that
    gene's job only and the batch continues.
    """

    def __init__(
        self,
        analyzer: GeneAnalyzer,
        max_workers: int = 4,
        timeout: Optional[float] = None,
    ):
        self.analyzer = analyzer
        self.max_workers = max_workers
        self.timeout = timeout
        self._status_lock = threading.Lock()

    @classmethod
    def from_settings(cls, analyzer: GeneAnalyzer, settings: "Settings") -> "BatchProcessor":
        """Create a processor with the worker count and timeout from settings."""
        return cls(analyzer, max_workers=settings.max_workers, timeout=settings.batch_timeout)

    def run(self, gene_ids: Iterable[str], config: AnalysisConfig) -> BatchResult:
        """Analyze every gene, returning once all jobs have finished.

        With a ``timeout`` (seconds, for the whole batch) genes still
        running when it expires are abandoned and marked failed; genes not
        yet started are cancelled. Job states are final once ``run``
        returns: abandoned work is discarded when it eventually finishes.
        """
        batch = BatchResult()
        for gene_id in gene_ids:
            if gene_id in batch.jobs:
                continue
            batch.jobs[gene_id] = GeneJob(gene_id=gene_id)

        if not batch.jobs:
            return batch

        logger.info(f"Analyzing {len(batch.jobs)} genes with {self.max_workers} workers")

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        futures: Dict[Future, GeneJob] = {
            executor.submit(self._run_job, job, config): job for job in batch.jobs.values()
        }
        _, not_done = wait(futures, timeout=self.timeout)
        for future in not_done:
            job = futures[future]
            with self._status_lock:
                # finished between wait() and here
                if future.done() or job.status in (JobStatus.COMPLETED, JobStatus.FAILED):
                    continue
                if future.cancel():
                    job.status = JobStatus.CANCELLED
                    job.error = "Cancelled after batch timeout"
                else:
                    logger.error(f"Gene {job.gene_id} timed out after {self.timeout}s")
                    job.status = JobStatus.FAILED
                    job.error = f"Timed out after {self.timeout} seconds"
                job.completed_at = datetime.now().isoformat()

        # abandoned tasks keep running in the background
        executor.shutdown(wait=not not_done)

        status = batch.get_queue_status()
        logger.info(
            f"Batch finished: {status['completed']} completed, "
            f"{status['failed']} failed, {status['cancelled']} cancelled"
        )
        return batch

    def _run_job(self, job: GeneJob, config: AnalysisConfig) -> GeneJob:
        """Execute one gene analysis and record its outcome on ``job``.

        The outcome is dropped if the job was settled by the batch timeout
        in the meantime.
        """
        with self._status_lock:
            if job.status != JobStatus.PENDING:
                return job
            job.status = JobStatus.RUNNING
            job.started_at = datetime.now().isoformat()

        context = AnalysisContext(job.gene_id)
        result = None
        error = ""
        try:
            result = self._analyze(job.gene_id, config, context)
        except ConfigurationError as e:
            context.logger.error(f"Skipping gene: {e}")
            error = str(e)
        except TFBSNexusError as e:
            context.logger.exception(str(e))
            error = str(e)

        with self._status_lock:
            if job.status != JobStatus.RUNNING:
                context.logger.info("Discarding outcome of abandoned analysis")
                return job
            if error:
                job.status = JobStatus.FAILED
                job.error = error
            else:
                job.status = JobStatus.COMPLETED
                job.result = result
            job.completed_at = datetime.now().isoformat()
        return job

    def _analyze(
        self, gene_id: str, config: AnalysisConfig, context: Optional[AnalysisContext] = None
    ) -> GeneResult:
        """Run the analyzer, wrapping unexpected failures in GeneAnalysisError."""
        try:
            return self.analyzer.analyze_gene(gene_id, config, context)
        except TFBSNexusError:
            raise
        except Exception as e:
            raise GeneAnalysisError(gene_id, str(e)) from e
