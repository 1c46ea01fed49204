"""
In-memory job registry
"""
import threading
from typing import Dict, List, Optional

from decompiler.models import AnalysisResult


class JobNotFoundError(KeyError):
    """Raised when a job id has no stored result"""


class JobStorage:
    """Keyed store of finished jobs; each job id is written once"""

    def __init__(self):
        self._jobs: Dict[str, AnalysisResult] = {}
        self._lock = threading.Lock()

    def save(self, job_id: str, result: AnalysisResult):
        with self._lock:
            if job_id in self._jobs:
                raise ValueError(f"Job {job_id} already stored")
            self._jobs[job_id] = result

    def get(self, job_id: str) -> Optional[AnalysisResult]:
        with self._lock:
            return self._jobs.get(job_id)

    def require(self, job_id: str) -> AnalysisResult:
        result = self.get(job_id)
        if result is None:
            raise JobNotFoundError(job_id)
        return result

    def list(self) -> List[AnalysisResult]:
        """Newest first"""
        with self._lock:
            return sorted(self._jobs.values(), key=lambda r: r.timestamp, reverse=True)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None

    def clear(self):
        with self._lock:
            self._jobs.clear()
