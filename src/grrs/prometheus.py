"""Prometheus metrics for the search pipeline"""

from prometheus_client import Counter, Gauge, Histogram


active_workers = Gauge('grrs_active_workers', 'Number of workers currently running a job')

worker_jobs_completed = Counter('grrs_worker_jobs_completed_total', 'Jobs finished without raising')
worker_jobs_failed = Counter('grrs_worker_jobs_failed_total', 'Jobs that raised inside a worker')

worker_job_seconds = Histogram(
    'grrs_worker_job_seconds',
    'Wall-clock time spent per job',
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

units_dispatched = Counter('grrs_units_dispatched_total', 'Search units submitted to the pool', ['kind'])
directories_skipped = Counter('grrs_directories_skipped_total', 'Directories that could not be listed')
