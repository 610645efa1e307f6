"""Main entry point for the farm environment simulator."""

import sys

from loguru import logger


def main():
    """Run the application."""
    if len(sys.argv) < 2:
        print("Usage: python main.py [api|env <lat> <lon> [--json]|simulate <days> [--json]]")
        sys.exit(1)

    cmd = sys.argv[1]
    as_json = "--json" in sys.argv

    from src.utils.logger import setup_logging
    # One-shot commands log to the console only
    setup_logging(log_to_file=cmd == "api")

    if cmd == "api":
        import uvicorn
        from src.utils.config import settings
        logger.info("Starting API server...")
        uvicorn.run("src.api.main:app", host=settings.api.host, port=settings.api.port, reload=settings.api.reload)

    elif cmd == "env":
        from src.core import EnvironmentAggregator, format_snapshot
        lat, lon = float(sys.argv[2]), float(sys.argv[3])
        aggregator = EnvironmentAggregator()
        print(format_snapshot(aggregator.fetch_environment(lat, lon), as_json))

    elif cmd == "simulate":
        from src.core import FarmSimulationEngine, format_farm, sustainability_report
        from src.farm import FarmStateStore, crop_catalog
        days = int(sys.argv[2]) if len(sys.argv) > 2 and sys.argv[2].isdigit() else 30
        store = FarmStateStore()
        engine = FarmSimulationEngine(store)
        for _ in range(days):
            engine.tick()
        state = store.snapshot()
        print(format_farm(state, sustainability_report(state, crop_catalog()), as_json))

    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
