"""
Job submission: validate, run, persist, report
"""
import logging
import random
import string
from typing import Dict, Optional
from urllib.parse import urlparse

from decompiler.fetcher import AssetRetriever
from decompiler.orchestrator import DecompilationError, WebDecompiler
from decompiler.storage import JobStorage

logger = logging.getLogger(__name__)

JOB_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_job_id(length: int = 9) -> str:
    return ''.join(random.choice(JOB_ID_ALPHABET) for _ in range(length))


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


def submit_job(url: str, storage: JobStorage, job_id: Optional[str] = None,
               retriever: Optional[AssetRetriever] = None, **options) -> Dict:
    """
    Run one job and save its result in ``storage``.

    Returns either ``{'success': True, 'jobId': ..., 'results': {...}}`` or
    ``{'error': ..., 'details': ...}``. A failed job leaves nothing in
    storage. Extra keyword options go to WebDecompiler.
    """
    if job_id is None:
        job_id = generate_job_id()

    if not url or not job_id:
        return {'error': 'URL and jobId are required'}

    if not is_valid_url(url):
        return {'error': 'Invalid URL provided'}

    if storage.get(job_id) is not None:
        return {'error': 'Job already exists', 'details': job_id}

    decompiler = WebDecompiler(url, job_id, retriever=retriever, **options)
    try:
        results = decompiler.run_full_decompilation()
    except DecompilationError as e:
        return {'error': 'Decompilation failed', 'details': str(e)}

    try:
        storage.save(job_id, results)
    except ValueError as e:
        return {'error': 'Job already exists', 'details': str(e)}

    return {
        'success': True,
        'jobId': job_id,
        'results': {
            **results.analysis.to_dict(),
            'bundles': len(results.bundles),
            'files': results.total_files
        }
    }
