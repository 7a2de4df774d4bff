# =============================================
# File: jitsi_exporter/cli/serve.py
# Purpose: CLI entrypoint that starts the exporter HTTP server.
# Usage:
#   poetry run python -m jitsi_exporter.cli.serve --videobridge-url http://jvb:8080/colibri/stats --web.listen-address :9888
# =============================================
from __future__ import annotations
import argparse

import uvicorn
from loguru import logger

from jitsi_exporter.config import Settings, load_settings
from jitsi_exporter.main import create_app
from jitsi_exporter.utils import slog
from jitsi_exporter.utils.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    # Defaults of None mean "fall back to env / built-in default" (see load_settings)
    ap = argparse.ArgumentParser(description="Expose Jitsi Videobridge /stats as Prometheus metrics.")
    ap.add_argument("--web.listen-address", dest="listen_address", default=None,
                    help="Address on which to expose metrics and web interface (default: :9888)")
    ap.add_argument("--videobridge-url", dest="videobridge_url", default=None,
                    help="Jitsi Videobridge /stats URL to scrape (default: http://localhost:8888/stats)")
    ap.add_argument("--web.user", dest="user", default=None, help="User name for http basic authentication.")
    ap.add_argument("--web.password", dest="password", default=None, help="Password for http basic authentication.")
    ap.add_argument("--timeout", type=float, default=None,
                    help="Upstream request timeout in seconds (default: none)")
    ap.add_argument("--log-level", dest="log_level", default=None, help="Log level (default: INFO)")
    ap.add_argument("--log-file", dest="log_file", default=None, help="Optional rotating log file")
    return ap


def parse_settings(argv=None) -> Settings:
    ap = build_parser()
    args = ap.parse_args(argv)
    try:
        return load_settings(**vars(args))
    except ValueError as e:
        ap.error(str(e))


def main(argv=None):
    settings = parse_settings(argv)
    configure_logging(settings.log_level, settings.log_file)

    host, port = settings.host_port()
    logger.info(
        f"Started Jitsi Meet Metrics Exporter on {host}:{port} "
        f"(upstream={slog.redact_url(settings.videobridge_url)}, basic_auth={settings.use_basic_auth})"
    )
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
