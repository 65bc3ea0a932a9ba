
import os
import subprocess
import sys

from colorama import Fore, Style

from .commands import Mode, build_arguments, build_command
from .exceptions import DownloadError
from .logger import get_logger

logger = get_logger(__name__)

SEPARATOR = "=" * 60
CLEAR_SCREEN = "\033[H\033[2J"
RETURN_PROMPT = "Press any key to return to menu..."

# Seconds to wait for yt-dlp to exit after terminate() before killing it
TERMINATE_TIMEOUT = 5


def read_key(stream=None):
    """Block until one key is pressed, without echoing it."""
    stream = stream or sys.stdin
    if not stream.isatty():
        return stream.read(1)

    import termios
    import tty

    fd = stream.fileno()
    old = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        # One read takes a whole escape sequence such as an arrow key
        return os.read(fd, 32).decode(errors="replace")
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old)


def print_banner(executable, url, out=None):
    out = out or sys.stdout
    if out.isatty():
        out.write(CLEAR_SCREEN)
    print(f"{Style.BRIGHT}Executing: {executable}{Style.RESET_ALL}", file=out)
    print(f"URL: {url}", file=out)
    print(SEPARATOR, file=out)
    print(file=out)
    out.flush()


def stop_process(process):
    """Terminate a running download, killing it if it ignores the request."""
    process.terminate()
    logger.debug("Sent terminate signal to download process")
    try:
        process.wait(timeout=TERMINATE_TIMEOUT)
        logger.debug("Download process terminated gracefully")
    except (subprocess.TimeoutExpired, KeyboardInterrupt):
        logger.warning("Process did not terminate, forcing kill")
        process.kill()
        process.wait()
        logger.info("Download process killed")


def run_process(command, popen=subprocess.Popen):
    """
    Run a command with the terminal's own stdin/stdout/stderr.

    Args:
        command: Executable followed by its arguments
        popen: Process factory (subprocess.Popen)

    Returns:
        The exit code, or None if the user interrupted it with Ctrl+C

    Raises:
        DownloadError: If the process could not be started
    """
    logger.debug(f"Executing command: {' '.join(command)}")
    try:
        process = popen(command)
    except (OSError, subprocess.SubprocessError) as e:
        # Shown to the user by report_launch_failure, keep it off the console
        logger.info(f"Failed to start yt-dlp process: {e}")
        raise DownloadError(command[0], e) from e

    logger.debug(f"Download process started with PID: {process.pid}")
    try:
        returncode = process.wait()
    except KeyboardInterrupt:
        logger.info("Download interrupted by user")
        stop_process(process)
        return None

    logger.info(f"Download process completed with return code: {returncode}")
    return returncode


def acknowledge(wait_key=read_key, out=None):
    """Show the return prompt and block for one keypress."""
    out = out or sys.stdout
    print(RETURN_PROMPT, file=out)
    out.flush()
    wait_key()


def report_launch_failure(error, wait_key=read_key, out=None):
    out = out or sys.stdout
    print(f"{Fore.RED}Error: {error.reason}{Style.RESET_ALL}", file=out)
    acknowledge(wait_key, out)


def run_download(mode, url, paths, popen=subprocess.Popen, wait_key=read_key, out=None):
    """
    Run one yt-dlp download in the foreground and wait for acknowledgment.

    The caller must have released the terminal: yt-dlp writes straight to it.

    Returns:
        The exit code of yt-dlp, or None if it was interrupted

    Raises:
        DownloadError: If yt-dlp could not be started
    """
    out = out or sys.stdout
    command = build_command(mode, url, paths)
    logger.info(f"Starting {Mode(mode).name.lower()} download: {url}")
    logger.debug(f"Arguments: {build_arguments(mode, url, paths)}")

    print_banner(paths.yt_dlp, url, out)
    returncode = run_process(command, popen)

    print(file=out)
    print(SEPARATOR, file=out)
    if returncode is None:
        print(f"{Fore.YELLOW}Download interrupted.{Style.RESET_ALL}", file=out)
    elif returncode != 0:
        print(f"{Fore.YELLOW}yt-dlp exited with code {returncode}{Style.RESET_ALL}", file=out)
    acknowledge(wait_key, out)
    return returncode
