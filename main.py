#!/usr/bin/env python3
"""
WebDecompiler - Website Bundle Decompiler
Discovers a site's JS/CSS bundles, beautifies them and recovers components,
modules and (when source maps are published) original sources
"""
import argparse
import logging
import os
import sys

from decompiler.explorer import list_files
from decompiler.fetcher import AssetRetriever
from decompiler.service import generate_job_id, submit_job
from decompiler.storage import JobStorage
from decompiler.writer import ArchiveWriter, ResultWriter

logging.basicConfig(
    level=logging.INFO,
    format='%(message)s'
)
logger = logging.getLogger(__name__)


def print_banner():
    print("=" * 70)
    print("WebDecompiler - Website Bundle Decompiler")
    print("=" * 70)
    print("\n[!] NOTICE:")
    print("   Use only on public/owned sites or with explicit permission.")
    print("   Output is a best-effort reconstruction, not compilable source.\n")
    print("=" * 70)
    print()


def print_files(result):
    print("\n[*] Files:")
    for item in list_files(result):
        print(f"  [{item['category']}] {item['name']} ({item['size']} chars)")


def decompile_single_url(url, output_dir, args, storage):
    """Decompile one URL; returns the stored result or None on failure"""
    os.makedirs(output_dir, exist_ok=True)

    job_id = generate_job_id()
    retriever = AssetRetriever(max_size=args.max_size)
    outcome = submit_job(
        url,
        job_id=job_id,
        storage=storage,
        retriever=retriever,
        recover_sourcemaps=args.sourcemaps,
        max_workers=args.workers
    )

    if not outcome.get('success'):
        details = outcome.get('details')
        logger.error(f"[!] {outcome['error']}{': ' + details if details else ''}")
        return None

    result = storage.require(job_id)

    try:
        ResultWriter().write(result, os.path.join(output_dir, f"{job_id}_results.json"))
    except OSError as e:
        logger.error(f"Failed to write results: {e}")

    if args.archive:
        writer = ArchiveWriter()
        try:
            writer.write(writer.build(result), os.path.join(output_dir, writer.archive_filename(result)))
        except OSError as e:
            logger.error(f"Archive generation failed: {e}")

    counts = outcome['results']
    print("\n" + "=" * 70)
    print("DECOMPILATION SUMMARY")
    print("=" * 70)
    print(f"Target: {url}")
    print(f"Job: {job_id}")
    print(f"Bundles: {counts['bundles']}")
    print(f"JavaScript files: {counts['jsFiles']}")
    print(f"CSS files: {counts['cssFiles']}")
    print(f"Components: {counts['components']}")
    print(f"Modules: {counts['modules']}")
    print(f"Files: {counts['files']}")
    print("=" * 70)

    if args.list_files:
        print_files(result)

    return result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='WebDecompiler - Website Bundle Decompiler',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single URL
  python main.py https://example.com

  # Multiple URLs (batch mode)
  python main.py https://example.com https://example2.com

  # Fetch bundles with 4 workers, skip source maps, list produced files
  python main.py https://example.com --workers 4 --no-sourcemaps --list-files
        """
    )

    parser.add_argument('urls', nargs='+', help='Target URL(s) to decompile')
    parser.add_argument('--output-dir', '-o', default='decompiled',
                       help='Directory for archives and JSON results (default: decompiled)')

    parser.add_argument('--max-size', type=int, default=10 * 1024 * 1024,
                       help='Maximum size of a fetched file in bytes (default: 10MB)')
    parser.add_argument('--workers', type=int, default=1,
                       help='Parallel bundle downloads (default: 1, sequential)')

    # Source map options
    parser.add_argument('--sourcemaps', action='store_true', default=True,
                       help='Recover original sources from <bundle>.map (default: True)')
    parser.add_argument('--no-sourcemaps', dest='sourcemaps', action='store_false',
                       help='Disable source map recovery')

    # Output options
    parser.add_argument('--no-archive', dest='archive', action='store_false',
                       help='Do not write the ZIP archive')
    parser.add_argument('--list-files', action='store_true',
                       help='Print the produced files after each job')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Debug logging')

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    print_banner()

    storage = JobStorage()
    urls = args.urls
    results = []

    for i, url in enumerate(urls, 1):
        if len(urls) > 1:
            print(f"\n[{i}/{len(urls)}] Decompiling: {url}")
            print("-" * 70)
        result = decompile_single_url(url, args.output_dir, args, storage)
        results.append((url, result))

    if len(urls) > 1:
        print("\n" + "=" * 70)
        print("[*] BATCH SUMMARY")
        print("=" * 70)
        successful = [r for _, r in results if r is not None]
        print(f"[+] Successful: {len(successful)}/{len(results)}")
        for url, result in results:
            status = "[+]" if result is not None else "[!]"
            components = result.analysis.components if result is not None else 0
            print(f"  {status} {url}: {components} components")
        print("=" * 70)

    print(f"\n[*] Results saved to: {args.output_dir}/")

    if all(result is None for _, result in results):
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
