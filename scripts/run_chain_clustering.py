#!/usr/bin/env python3
"""
Run chain detection on a file of business records.

Usage:
    python scripts/run_chain_clustering.py data/businesses.json
    python scripts/run_chain_clustering.py data/businesses.csv --mode connected --csv data/members.csv
    python scripts/run_chain_clustering.py data/businesses.json --record-id biz_123
"""

import argparse
import csv
import json
import sys
from dataclasses import replace
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging import setup_logging
from processing.chain_resolution import ChainIntelligenceService, ResolverConfig
from processing.chain_resolution.config import CLUSTERING_MODES
from processing.chain_resolution.ingest import load_records


def export_members_csv(clusters, path: Path) -> Path:
    """Write one row per cluster member for review."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([
            "cluster_id", "canonical_name", "cluster_confidence", "total_locations",
            "member_id", "member_name", "role", "match_reasons",
        ])
        for cluster in clusters:
            for member in cluster.members:
                writer.writerow([
                    cluster.cluster_id,
                    cluster.canonical_name,
                    f"{cluster.confidence:.2f}",
                    cluster.total_locations,
                    member.id,
                    member.name,
                    member.role.value,
                    " | ".join(member.match_reasons),
                ])

    return path


def main():
    parser = argparse.ArgumentParser(
        description="Group business records into chain/franchise clusters"
    )
    parser.add_argument("input", type=Path, help="JSON or CSV file of business records")
    parser.add_argument("--output", type=Path, help="Write clusters as JSON to this path")
    parser.add_argument("--csv", type=Path, help="Export cluster members to CSV")
    parser.add_argument(
        "--mode",
        choices=CLUSTERING_MODES,
        help="Clustering strategy (default from CHAIN_CLUSTERING_MODE)",
    )
    parser.add_argument(
        "--blocking",
        action="store_true",
        help="Only score names between records sharing a blocking key",
    )
    parser.add_argument("--workers", type=int, help="Threads used to scan candidates")
    parser.add_argument(
        "--record-id",
        help="Run single-record detection for this id instead of batch clustering",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip invalid rows instead of aborting",
    )

    args = parser.parse_args()
    logger = setup_logging()

    try:
        records, rejected = load_records(args.input, strict=not args.lenient)
    except (ValueError, OSError) as e:
        logger.error(f"Could not load records: {e}")
        sys.exit(1)

    overrides = {}
    if args.mode:
        overrides["clustering_mode"] = args.mode
    if args.blocking:
        overrides["use_blocking"] = True
    if args.workers:
        overrides["workers"] = args.workers
    try:
        config = replace(ResolverConfig.from_settings(), **overrides)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    service = ChainIntelligenceService(config)

    print("=" * 60)
    print("CHAIN DETECTION")
    print("=" * 60)
    print(f"Records loaded: {len(records)}")
    print(f"Rows rejected: {len(rejected)}")
    print(f"Mode: {config.clustering_mode}{' + blocking' if config.use_blocking else ''}")
    print("=" * 60)

    if args.record_id:
        subject = next((r for r in records if r.id == args.record_id), None)
        if subject is None:
            logger.error(f"No record with id {args.record_id}")
            sys.exit(1)

        result = service.detect_chain(subject, records)
        print(json.dumps(result.to_dict(), indent=2))
        return

    clusters = service.cluster_businesses(records)
    clusters.sort(key=lambda c: c.total_locations, reverse=True)

    for cluster in clusters:
        print(
            f"{cluster.canonical_name:<40} {cluster.total_locations:>4} locations  "
            f"conf={cluster.confidence:.2f}  [{cluster.cluster_id}]"
        )

    clustered = sum(c.total_locations for c in clusters)
    print("=" * 60)
    print(f"Chain clusters: {len(clusters)}")
    print(f"Records in chains: {clustered}")
    print(f"Independent records: {len(records) - clustered}")

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump([c.to_dict() for c in clusters], f, indent=2)
        print(f"\nClusters written to: {args.output}")

    if args.csv:
        csv_path = export_members_csv(clusters, args.csv)
        print(f"Members exported to: {csv_path}")


if __name__ == "__main__":
    main()
