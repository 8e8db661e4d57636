"""
Offline ingestion job: reads the registry CSV files, embeds every company
and upserts it into the vector index under its category.
"""

import argparse
import logging
import sys
from typing import List, Tuple

from config import configure_logging, load_settings
from services.embeddings import build_embedding_client
from services.normalizer import read_companies_csv
from services.pipeline import BatchUpsertPipeline
from services.vector_store import build_vector_store

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = [
    "consumer-electronics=./doc/consumer_electronics_companies_data.csv",
    "pharmaceutical=./doc/pharmaceutical_companies_data.csv",
]

def parse_source(value: str) -> Tuple[str, str]:
    """
    Parses a CATEGORY=PATH argument.
    """
    category, sep, path = value.partition("=")
    if not sep or not category or not path:
        raise argparse.ArgumentTypeError(f"Expected CATEGORY=PATH, got '{value}'")
    return category, path

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ingest company CSV files into the vector index")
    parser.add_argument(
        "--source",
        action="append",
        type=parse_source,
        help="CATEGORY=PATH pair; may be repeated (defaults to the two registry files)"
    )
    parser.add_argument("--batch-size", type=int, help="Companies per upsert batch")
    parser.add_argument("--batch-delay", type=float, help="Seconds to pause between batches")
    return parser

def main(argv: List[str] = None) -> int:
    args = build_parser().parse_args(argv)
    sources = args.source or [parse_source(value) for value in DEFAULT_SOURCES]

    configure_logging()
    try:
        settings = load_settings()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1
    configure_logging(settings.log_level)

    logger.info("Starting data ingestion process...")
    try:
        datasets = []
        for category, path in sources:
            logger.info("Reading %s data from %s...", category, path)
            result = read_companies_csv(path)
            datasets.append((category, result.companies))
            logger.info("Found %d unique %s companies", len(result.companies), category)

        pipeline = BatchUpsertPipeline(
            build_embedding_client(settings),
            build_vector_store(settings),
            batch_size=args.batch_size or settings.batch_size,
            batch_delay=settings.batch_delay if args.batch_delay is None else args.batch_delay,
            max_batch_delay=settings.max_batch_delay,
            namespace=settings.pinecone_namespace
        )
        reports = [pipeline.run(companies, category) for category, companies in datasets]
    except (OSError, ValueError) as e:
        logger.error("Error during ingestion: %s", e)
        return 1

    for report in reports:
        logger.info(
            "%s: %d/%d companies uploaded, %d failures",
            report.category, report.upserted, report.total, len(report.failures)
        )
    logger.info("Data ingestion completed. Total companies uploaded: %d",
                sum(report.upserted for report in reports))
    return 0

if __name__ == "__main__":
    sys.exit(main())
