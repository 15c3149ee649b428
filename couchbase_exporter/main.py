"""Main application entry point for the Couchbase per-node bucket stats exporter."""

import argparse
import asyncio
import logging
import signal
import sys
import time

from prometheus_client import CollectorRegistry, REGISTRY, start_http_server

from .collectors.pernode_bucket_collector import PerNodeBucketCollector
from .collectors.pernode_bucket_metrics import PerNodeBucketMetrics
from .config.loader import ConfigLoader
from .config.models import ExporterSystemConfig
from .config.settings import Settings
from .services.couchbase_client import CouchbaseClient
from .utils.logger import setup_logger


class ExporterApp:
    """
    Main exporter application.

    Serves the Prometheus endpoint and runs the per-node bucket stats
    collector until a shutdown signal arrives.
    """

    def __init__(
        self,
        config_path: str = "config/config.yaml",
        log_level: str = None,
        registry: CollectorRegistry = REGISTRY
    ):
        """
        Initialize exporter application.

        Args:
            config_path: Path to configuration file
            log_level: Overrides the configured log level when set
            registry: Registry the gauges are registered in and served from
        """
        self.config_path = config_path
        self.logger = setup_logger("couchbase_exporter", log_level or "INFO")
        self.config = self._load_config()

        level = log_level or self.config.logging.level
        self.logger.setLevel(level.upper())

        self.registry = registry
        self.metrics = PerNodeBucketMetrics(
            registry=registry,
            namespace=self.config.exporter.namespace
        )
        self._shutdown = None

    def _load_config(self) -> ExporterSystemConfig:
        """
        Load and validate configuration.

        Credentials left empty in the file are taken from CB_USERNAME and
        CB_PASSWORD.

        Raises:
            SystemExit: If configuration is invalid
        """
        try:
            self.logger.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load_from_file(self.config_path)
        except FileNotFoundError:
            self.logger.error(
                f"Configuration file not found: {self.config_path}\n"
                "Please create config/config.yaml from config/config.example.yaml"
            )
            sys.exit(1)
        except Exception as e:
            self.logger.error(f"Failed to load configuration: {e}", exc_info=True)
            sys.exit(1)

        if not config.couchbase.username:
            try:
                Settings.validate_required()
            except ValueError as e:
                self.logger.error(str(e))
                sys.exit(1)
            settings = Settings()
            config.couchbase.username = settings.CB_USERNAME
            config.couchbase.password = settings.CB_PASSWORD

        self.logger.info("Configuration loaded successfully")
        return config

    def _signal_handler(self, signum: int) -> None:
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, initiating graceful shutdown...")
        self._shutdown.set()

    def start_metrics_server(self) -> None:
        """Expose the registry over HTTP."""
        exporter = self.config.exporter
        start_http_server(exporter.port, addr=exporter.listen_address, registry=self.registry)
        self.logger.info(f"Serving metrics on {exporter.listen_address}:{exporter.port}")

    async def run_once(self) -> int:
        """
        Prepare and run a single poll cycle.

        Returns:
            int: Process exit code
        """
        start_time = time.time()
        async with CouchbaseClient(self.config.couchbase, self.logger) as client:
            collector = PerNodeBucketCollector(
                client, self.metrics, self.config.collection, self.logger
            )
            results = await collector.run_once()

        if results is None:
            self.logger.error("Collection could not be started")
            return 1

        for result in results:
            self.logger.info(
                f"{result.target_name}: {result.message}",
                extra={"status": result.status.value, "error": result.error}
            )
        self.logger.info(
            f"Poll cycle completed in {time.time() - start_time:.1f}s for {len(results)} buckets"
        )
        return 0

    async def run(self) -> int:
        """
        Start collection and serve until SIGINT/SIGTERM.

        Returns:
            int: Process exit code
        """
        loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        for signum in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(signum, self._signal_handler, signum)

        try:
            self.start_metrics_server()
            return await self._serve()
        finally:
            for signum in (signal.SIGTERM, signal.SIGINT):
                loop.remove_signal_handler(signum)

    async def _serve(self) -> int:
        async with CouchbaseClient(self.config.couchbase, self.logger) as client:
            collector = PerNodeBucketCollector(
                client, self.metrics, self.config.collection, self.logger
            )
            shutdown = asyncio.create_task(self._shutdown.wait())

            # Startup may spend its whole retry budget waiting; a signal ends it early
            starting = asyncio.create_task(collector.start())
            await asyncio.wait([starting, shutdown], return_when=asyncio.FIRST_COMPLETED)

            if not starting.done():
                starting.cancel()
                await asyncio.gather(starting, return_exceptions=True)
                self.logger.info("Shutdown requested before collection started")
                return 0

            if not starting.result():
                shutdown.cancel()
                self.logger.error("Per-node bucket stats collection failed to start")
                return 1

            if not shutdown.done():
                await asyncio.wait(
                    [collector.task, shutdown],
                    return_when=asyncio.FIRST_COMPLETED
                )
            shutdown.cancel()
            await collector.stop()

        self.logger.info("Exporter stopped")
        return 0


def main():
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Couchbase per-node bucket statistics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve metrics and poll continuously
  couchbase-exporter

  # Poll once, log the results and exit
  couchbase-exporter --run-once

  # Use custom config file
  couchbase-exporter --config /path/to/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default='config/config.yaml',
        help='Path to configuration file (default: config/config.yaml)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Run one poll cycle and exit (no metrics server)'
    )

    parser.add_argument(
        '--log-level',
        default=Settings().LOG_LEVEL or None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: config file value or LOG_LEVEL env var)'
    )

    args = parser.parse_args()

    try:
        app = ExporterApp(config_path=args.config, log_level=args.log_level)

        if args.run_once:
            exit_code = asyncio.run(app.run_once())
        else:
            exit_code = asyncio.run(app.run())

        sys.exit(exit_code)

    except Exception as e:
        logging.error(f"Application startup failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
