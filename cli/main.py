"""Entry point for the polar-migrate shell."""

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

from common.constants import POLAR_API_URLS
from common.logging_config import setup_logging
from cli.commands import init_uploader
from cli.config import DEFAULT_CONFIG_PATH, Config
from cli.repl import repl_loop


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='polar-migrate',
        description='Interactive shell for uploading product files to Polar.'
    )
    parser.add_argument('--debug', action='store_true', help='log transfer phases and HTTP calls')
    parser.add_argument(
        '--config', type=Path, default=DEFAULT_CONFIG_PATH,
        help=f'config file (default: {DEFAULT_CONFIG_PATH})'
    )
    parser.add_argument(
        '--server', choices=sorted(POLAR_API_URLS),
        help='environment for this session only; the config file is not changed'
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    log_level = 'DEBUG' if args.debug else os.getenv('LOG_LEVEL', 'WARNING')

    # Engine loggers live under 'transfer', shell loggers under 'cli'
    logger = setup_logging('cli', log_level=log_level)
    setup_logging('transfer', log_level=log_level)

    config = Config(args.config)
    if args.server:
        config.data['server'] = args.server
    init_uploader(config)

    logger.info(f"Shell starting [config={config.config_path} server={config.get_server()}]")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"Shell error: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    main()
