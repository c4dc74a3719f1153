"""
run.py — Backfill images for saved providers that have none yet.

Usage:
    # Resolve and store images for every provider missing one
    python -m provider_images.run

    # Try the first 20 without writing anything
    python -m provider_images.run --limit 20 --dry-run --verbose

Environment variables:
    SUPABASE_URL, SUPABASE_KEY
"""

import argparse
import logging
import sys
from dataclasses import replace

from database.provider_store import SupabaseProviderStore
from provider_images.config import DEFAULT_CONFIG_PATH, load_config
from provider_images.descriptor import ProviderDescriptor
from provider_images.resolver import ImageResolver

log = logging.getLogger(__name__)


def _setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s  %(levelname)-8s  %(name)s  %(message)s',
        datefmt='%H:%M:%S',
        handlers=[
            logging.StreamHandler(sys.stdout),
        ]
    )
    # Quieten noisy third-party loggers
    for noisy in ('urllib3', 'requests', 'httpx', 'httpcore', 'supabase', 'postgrest'):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def run_backfill(store, config, limit=None, dry_run=False, workers=None,
                 session=None) -> dict:
    """
    Resolve every provider row without an image and write results back.

    Returns a tally of results by source.
    """
    rows = store.load_providers_missing_images(limit=limit)
    descriptors = [ProviderDescriptor.from_record(row) for row in rows]
    descriptors = [d for d in descriptors if d.identity]
    if workers:
        config = replace(config, max_workers=workers)

    resolver = ImageResolver.from_config(
        config,
        store=None if dry_run else store,
        session=session,
    )

    stats = {}
    try:
        results = resolver.resolve_many(descriptors, max_workers=workers)
        for i, (descriptor, result) in enumerate(zip(descriptors, results), 1):
            source = result.source.value
            stats[source] = stats.get(source, 0) + 1
            print(
                f'[{i:4}/{len(descriptors)}] {source:<16} '
                f'{(descriptor.display_name or descriptor.identity)[:40]}',
                flush=True,
            )
    finally:
        resolver.close()

    log.info('─' * 60)
    log.info('BACKFILL COMPLETE')
    log.info(f'  Providers:  {len(descriptors)}')
    for source, count in sorted(stats.items()):
        log.info(f'  {source:<16} {count}')
    if dry_run:
        log.info('  ⚠️  DRY RUN — nothing written to the database')
    return stats


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Resolve display images for providers that have none',
    )
    parser.add_argument('--config', default=DEFAULT_CONFIG_PATH, metavar='PATH',
                        help=f'YAML config file (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('--limit', type=int, default=None, metavar='N',
                        help='Process at most N providers')
    parser.add_argument('--workers', type=int, default=None, metavar='N',
                        help='Concurrent resolutions (default: max_workers from config)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Resolve images but do NOT write them back')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable DEBUG logging')

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args.config)
        store = SupabaseProviderStore.from_env(table=config.store_table)
        stats = run_backfill(
            store,
            config,
            limit=args.limit,
            dry_run=args.dry_run,
            workers=args.workers,
        )
    except KeyboardInterrupt:
        print('\n\n⚠️  Interrupted. Re-run to resume (providers with an image are skipped).')
        return 1
    except Exception as e:
        log.error(f'Fatal error: {e}', exc_info=True)
        return 1

    total = sum(stats.values())
    print(f'\n✅  Done — {total} provider(s) resolved')
    return 0


if __name__ == '__main__':
    sys.exit(main())
