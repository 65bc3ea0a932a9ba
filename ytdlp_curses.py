#!/usr/bin/env python3
"""
ytdlp-curses - terminal download menu for yt-dlp
Download single videos, video playlists and audio
with preset yt-dlp options, from a curses menu
"""

import sys
from ytdlpcurses.main import main

if __name__ == "__main__":
    sys.exit(main())
