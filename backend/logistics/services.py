"""
Wiring for the jobs API: builds a JobService on the Django store and the
live Distance Matrix client. Built per request; nothing here is process-wide.
"""
from jobs.service import JobService
from routing.distance_matrix_client import DistanceMatrixClient
from routing.eta_service import EtaResolver

from .store import DjangoJobStore


def build_job_service() -> JobService:
    return JobService(
        store=DjangoJobStore(),
        eta_resolver=EtaResolver(DistanceMatrixClient()),
    )
