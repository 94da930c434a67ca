"""
Main entry point for the Orders in Council monitoring system.
"""

import argparse
import logging
import sys

import structlog

from .core.config import Settings
from .orchestration import OrdersInCouncilPipeline


def setup_logging(level: str = "INFO"):
    """Configure structured logging."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Orders in Council keyword monitor and RSS publisher"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Search, update the store and publish the feed')
    run_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Search and resolve without writing the store or the feed'
    )

    subparsers.add_parser('health', help='Check system health')
    subparsers.add_parser('stats', help='Show knowledge store statistics')

    return parser


def main(argv=None, settings: Settings = None, pipeline: OrdersInCouncilPipeline = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = settings or Settings()
    setup_logging(settings.log_level)
    logger = structlog.get_logger(__name__)

    pipeline = pipeline or OrdersInCouncilPipeline(settings)

    if args.command == 'run':
        logger.info("Starting pipeline execution", dry_run=args.dry_run)
        pipeline_run = pipeline.run(dry_run=args.dry_run)

        if pipeline_run.status == "completed":
            sys.exit(0)
        sys.exit(1)

    elif args.command == 'health':
        logger.info("Running health checks")
        health_status = pipeline.health_check()

        print("\n=== System Health Check ===")
        for component, status in health_status.items():
            print(f"{component.replace('_', ' ').title()}: {'OK' if status else 'FAILED'}")

        all_healthy = all(health_status.values())
        print(f"\nOverall Status: {'HEALTHY' if all_healthy else 'ISSUES DETECTED'}")

        sys.exit(0 if all_healthy else 1)

    elif args.command == 'stats':
        stats = pipeline.store_stats()

        print("\n=== Knowledge Store ===")
        print(f"Documents: {stats['total_documents']}")
        print(f"With PC number: {stats['with_pc_number']}")
        print(f"With date: {stats['with_date']}")
        print("Keyword matches:")
        for keyword in settings.keywords:
            print(f"  {keyword}: {stats['keyword_matches'].get(keyword, 0)}")


if __name__ == "__main__":
    main()
