
import argparse
import logging
import os

import colorama

from . import config
from .exceptions import ConfigurationError
from .logger import get_logger, setup_logger
from .menu import DownloadMenu
from .terminal import TerminalSession

__version__ = "1.0.0"

logger = get_logger(__name__)


def check_dependencies(paths):
    """
    Check that the configured tools exist and can be executed.

    Missing tools are only reported: the download itself fails with a
    readable error if yt-dlp can't be started.

    Returns:
        List of missing tool paths
    """
    logger.info("Checking dependencies...")

    missing = []
    for name, path in (("yt-dlp", paths.yt_dlp), ("ffmpeg", paths.ffmpeg), ("deno", paths.deno)):
        if not (path.is_file() and os.access(path, os.X_OK)):
            logger.warning(f"{name} not found or not executable at {path}")
            missing.append(str(path))

    if missing:
        logger.info(f"Missing tools (downloads may fail): {', '.join(missing)}")
    else:
        logger.info("All tools found")
    return missing


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="ytdlp-curses",
        description="Terminal menu for downloading videos, playlists and audio with yt-dlp.",
    )
    parser.add_argument("--yt-dlp", dest="yt_dlp", metavar="PATH",
                        help="yt-dlp executable (default: ~/.local/bin/yt-dlp)")
    parser.add_argument("--ffmpeg", metavar="PATH",
                        help="ffmpeg executable (default: /usr/bin/ffmpeg)")
    parser.add_argument("--deno", metavar="PATH",
                        help="deno executable used by yt-dlp (default: ~/.deno/bin/deno)")
    parser.add_argument("--output-dir", dest="output_base", metavar="DIR",
                        help="base directory for downloads (default: ~/Videos/yt-dlp-output)")
    parser.add_argument("--save-config", action="store_true",
                        help="store the resulting paths in the config file")
    parser.add_argument("--debug", action="store_true",
                        help="write debug messages to the log file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point for the application."""
    args = parse_args(argv)
    setup_logger(logging.DEBUG if args.debug else logging.INFO)
    colorama.just_fix_windows_console()
    logger.info("ytdlp-curses starting...")

    overrides = {
        'yt_dlp': args.yt_dlp,
        'ffmpeg': args.ffmpeg,
        'deno': args.deno,
        'output_base': args.output_base,
    }
    paths = config.resolve_paths(config.load_config(), overrides)
    logger.info(f"Using yt-dlp at {paths.yt_dlp}, output in {paths.output_base}")

    if args.save_config:
        try:
            config.save_config(paths.to_config())
        except ConfigurationError as e:
            logger.error(f"Could not save configuration: {e}")

    check_dependencies(paths)

    session = TerminalSession()
    try:
        with session:
            DownloadMenu(session, paths).run()
    except KeyboardInterrupt:
        logger.info("Interrupted at the menu")

    logger.info("ytdlp-curses exiting")
    return 0
