"""
yt-dlp command lines for the four download modes.

Every mode is described by a ModeProfile; the argument list is assembled from
shared flag groups so the set of flags each mode gets can be read off the
PROFILES table directly.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Sequence, Tuple

from .exceptions import InvalidModeError


class Mode(IntEnum):
    SINGLE_VIDEO = 0
    PLAYLIST_VIDEO = 1
    SINGLE_AUDIO = 2
    PLAYLIST_AUDIO = 3

    @property
    def profile(self) -> "ModeProfile":
        return PROFILES[self]

    @property
    def label(self) -> str:
        return self.profile.label

    @property
    def is_video(self) -> bool:
        return self.profile.video

    @property
    def is_playlist(self) -> bool:
        return self.profile.playlist


@dataclass(frozen=True)
class ModeProfile:
    label: str
    folder: str
    video: bool
    playlist: bool
    target: str


# Extract Audio Playlist targets mp3 like Extract Audio; older releases of this
# menu passed "-t mkv" for it, which recoded playlist audio into video files.
PROFILES: Dict[Mode, ModeProfile] = {
    Mode.SINGLE_VIDEO: ModeProfile("Download Video", "single_video", video=True, playlist=False, target="mkv"),
    Mode.PLAYLIST_VIDEO: ModeProfile("Download Video Playlist", "playlist_video", video=True, playlist=True, target="mkv"),
    Mode.SINGLE_AUDIO: ModeProfile("Extract Audio", "single_audio", video=False, playlist=False, target="mp3"),
    Mode.PLAYLIST_AUDIO: ModeProfile("Extract Audio Playlist", "playlist_audio", video=False, playlist=True, target="mp3"),
}

SINGLE_TEMPLATE = "%(uploader)s_%(title)s/%(uploader)s_%(title)s.%(ext)s"
PLAYLIST_TEMPLATE = (
    "%(playlist_uploader)s_%(playlist)s/"
    "%(playlist_index)s_%(title)s/%(playlist_index)s_%(title)s.%(ext)s"
)

# Shared flag groups
SAFETY_FLAGS = ("--ignore-config", "--abort-on-error", "--no-mark-watched")
SIDECAR_FLAGS = ("--write-description", "--write-info-json")
PROGRESS_FLAGS = ("--progress", "--console-title")
VIDEO_EMBED_FLAGS = (
    "--write-subs", "--sub-format", "best", "--embed-subs",
    "--embed-thumbnail", "--embed-metadata", "--embed-chapters",
    "--embed-info-json", "--xattrs", "--convert-thumbnails", "png",
)
AUDIO_EMBED_FLAGS = ("--embed-metadata", "--xattrs")
SPONSORBLOCK_STRIP_FLAGS = ("--sponsorblock-mark", "all", "--sponsorblock-remove", "sponsor")
SPONSORBLOCK_OFF_FLAGS = ("--no-sponsorblock",)

# Options whose value is shown without quotes in the display form
UNQUOTED_VALUE_OPTIONS = frozenset({"-t", "--js-runtimes"})


def _mode(mode) -> Mode:
    try:
        return Mode(mode)
    except ValueError:
        raise InvalidModeError(mode) from None


def output_template(mode, output_base) -> str:
    """Return the yt-dlp -o template for a mode below the output root."""
    profile = _mode(mode).profile
    layout = PLAYLIST_TEMPLATE if profile.playlist else SINGLE_TEMPLATE
    return f"{output_base}/{profile.folder}/{layout}"


def build_argument_list(mode, url: str, paths) -> Tuple[str, ...]:
    """
    Build the yt-dlp arguments for one download.

    Args:
        mode: Mode or its menu index (0-3)
        url: Video or playlist URL, passed through untouched as the last argument
        paths: ToolPaths with the helper tool locations and output root

    Returns:
        Tuple of arguments, not including the yt-dlp executable itself

    Raises:
        InvalidModeError: If mode is not one of the four download modes
    """
    profile = _mode(mode).profile
    args: List[str] = [*SAFETY_FLAGS,
                       "--ffmpeg-location", str(paths.ffmpeg),
                       "--js-runtimes", f"deno:{paths.deno}"]

    args += ["--color", "always" if profile.video else "auto-tty"]
    args.append("--yes-playlist" if profile.playlist else "--no-playlist")
    args += ["-o", output_template(mode, paths.output_base)]

    args.append("--restrict-filenames")
    if profile.playlist:
        args.append("--write-playlist-metafiles")
    args += SIDECAR_FLAGS
    if profile.video:
        args.append("--write-all-thumbnails")
    args += PROGRESS_FLAGS

    if profile.video:
        args += VIDEO_EMBED_FLAGS
        args += SPONSORBLOCK_STRIP_FLAGS
        args += ["--recode-video", profile.target]
    else:
        args += AUDIO_EMBED_FLAGS
        args += SPONSORBLOCK_OFF_FLAGS

    args += ["-t", profile.target, "-t", "sleep", url]
    return tuple(args)


def format_arguments(args: Sequence[str]) -> str:
    """
    Render an argument list the way it would be typed in a shell.

    Option values and the trailing URL are wrapped in double quotes. Quote
    characters inside them are not escaped, so the result is for display only.
    """
    parts = []
    previous = None
    last = len(args) - 1
    for index, arg in enumerate(args):
        if index != last and (arg.startswith("-") or previous in UNQUOTED_VALUE_OPTIONS):
            parts.append(arg)
        else:
            parts.append(f'"{arg}"')
        previous = arg
    return " ".join(parts)


def build_arguments(mode, url: str, paths) -> str:
    """Build the yt-dlp arguments for one download as a single display string."""
    return format_arguments(build_argument_list(mode, url, paths))


def build_command(mode, url: str, paths) -> List[str]:
    """Full command for subprocess: the yt-dlp executable followed by its arguments."""
    return [str(paths.yt_dlp), *build_argument_list(mode, url, paths)]
