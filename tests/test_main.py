import logging
from pathlib import Path

import pytest

from ytdlpcurses import config, logger as logger_module, main as main_module
from ytdlpcurses.config import ToolPaths


@pytest.fixture(autouse=True)
def isolated_files(tmp_path, monkeypatch):
    monkeypatch.setattr(logger_module, "LOG_FILE", tmp_path / "logs" / "app.log")
    monkeypatch.setattr(config, "CONFIG_FILE", tmp_path / "config.json")
    yield
    package_logger = logging.getLogger(logger_module.PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()


class StubMenu:
    runs = []

    def __init__(self, session, paths):
        self.session = session
        self.paths = paths

    def run(self):
        StubMenu.runs.append(self.paths)


class StubSession:
    def __enter__(self):
        return None

    def __exit__(self, *exc):
        return False


@pytest.fixture
def stubbed_ui(monkeypatch):
    StubMenu.runs = []
    monkeypatch.setattr(main_module, "DownloadMenu", StubMenu)
    monkeypatch.setattr(main_module, "TerminalSession", StubSession)
    return StubMenu


def make_tool(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)
    return path


def test_check_dependencies_reports_missing_tools(tmp_path):
    paths = ToolPaths(
        yt_dlp=make_tool(tmp_path / "bin" / "yt-dlp"),
        ffmpeg=tmp_path / "bin" / "ffmpeg",
        deno=make_tool(tmp_path / "bin" / "deno"),
        output_base=tmp_path / "out",
    )

    assert main_module.check_dependencies(paths) == [str(tmp_path / "bin" / "ffmpeg")]


def test_check_dependencies_all_present(tmp_path):
    paths = ToolPaths(
        yt_dlp=make_tool(tmp_path / "yt-dlp"),
        ffmpeg=make_tool(tmp_path / "ffmpeg"),
        deno=make_tool(tmp_path / "deno"),
        output_base=tmp_path,
    )

    assert main_module.check_dependencies(paths) == []


def test_parse_args_path_overrides():
    args = main_module.parse_args(["--yt-dlp", "/opt/yt-dlp", "--output-dir", "/tmp/out", "--debug"])

    assert args.yt_dlp == "/opt/yt-dlp"
    assert args.output_base == "/tmp/out"
    assert args.ffmpeg is None
    assert args.debug is True


def test_main_runs_menu_with_resolved_paths(stubbed_ui, monkeypatch):
    monkeypatch.setenv("HOME", "/home/alex")

    assert main_module.main(["--ffmpeg", "/opt/ffmpeg"]) == 0

    (paths,) = stubbed_ui.runs
    assert paths.ffmpeg == Path("/opt/ffmpeg")
    assert paths.yt_dlp == Path("/home/alex/.local/bin/yt-dlp")


def test_main_save_config(stubbed_ui, tmp_path):
    main_module.main(["--deno", "/opt/deno", "--save-config"])

    saved = config.load_config(tmp_path / "config.json")
    assert saved["deno_path"] == "/opt/deno"
    assert set(saved) == set(config.PATH_KEYS)


def test_main_uses_config_file(stubbed_ui, tmp_path):
    config.save_config({"output_dir": str(tmp_path / "videos")}, tmp_path / "config.json")

    main_module.main([])

    assert stubbed_ui.runs[0].output_base == tmp_path / "videos"


def test_main_treats_ctrl_c_at_menu_as_quit(monkeypatch):
    class InterruptedMenu(StubMenu):
        def run(self):
            raise KeyboardInterrupt()

    monkeypatch.setattr(main_module, "DownloadMenu", InterruptedMenu)
    monkeypatch.setattr(main_module, "TerminalSession", StubSession)

    assert main_module.main([]) == 0


def test_setup_logger_writes_log_file(tmp_path):
    log = logger_module.setup_logger(logging.DEBUG)
    logger_module.get_logger("ytdlpcurses.tests").debug("hello log")
    for handler in log.handlers:
        handler.flush()

    assert "hello log" in (tmp_path / "logs" / "app.log").read_text(encoding="utf-8")
    assert logger_module.get_logger("other").name == "ytdlpcurses.other"
