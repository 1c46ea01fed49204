"""
File listing and lookup over a stored job's artifacts
"""
from typing import Dict, List

from decompiler.models import AnalysisResult


def component_filename(name: str, index: int) -> str:
    return f"{name}_{index}.jsx"


def list_files(result: AnalysisResult) -> List[Dict]:
    """Originals, beautified files, then components as virtual .jsx files"""
    files = []

    for filename, content in result.original_files.items():
        files.append({'name': filename, 'type': 'file', 'category': 'original', 'size': len(content)})

    for filename, content in result.beautified_files.items():
        files.append({'name': filename, 'type': 'file', 'category': 'beautified', 'size': len(content)})

    for i, component in enumerate(result.components):
        files.append({
            'name': component_filename(component.name, i),
            'type': 'file',
            'category': 'components',
            'size': len(component.code)
        })

    return files


def describe_job(result: AnalysisResult) -> Dict:
    return {
        'success': True,
        'jobId': result.job_id,
        'url': result.url,
        'files': list_files(result),
        'analysis': result.analysis.to_dict(),
        'bundles': [b.to_dict() for b in result.bundles]
    }


def get_file(result: AnalysisResult, filename: str) -> Dict:
    """Content of one original or beautified file"""
    if filename in result.original_files:
        content = result.original_files[filename]
        category = 'original'
    elif filename in result.beautified_files:
        content = result.beautified_files[filename]
        category = 'beautified'
    else:
        raise FileNotFoundError(filename)

    return {'name': filename, 'content': content, 'category': category, 'size': len(content)}
