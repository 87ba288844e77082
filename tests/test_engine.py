from pathlib import Path

from soulcast.drawing import ColorMode
from soulcast.engine import SoulcastEngine


class Rom:
    def __init__(self):
        self.paths = []
        self.calls = []

    def __call__(self, path, api):
        self.paths.append(path)
        api.init = lambda: self.calls.append("init")
        api.update = lambda: None
        api.render = lambda: None


def test_init_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    engine = SoulcastEngine()
    assert engine.init(tmp_path / "missing") is False
    assert engine.initialized is False


def test_init_enters_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    project = tmp_path / "project"
    project.mkdir()
    engine = SoulcastEngine(loader=Rom())
    assert engine.init(project) is True
    assert engine.initialized is True
    assert Path.cwd() == project.resolve()


def test_init_runs_main_script(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    rom = Rom()
    engine = SoulcastEngine(loader=rom)
    engine.init(tmp_path)
    assert rom.paths == [Path("Data") / "Scripts" / "Main.lua"]
    assert rom.calls == ["init"]
    assert engine.scripting.had_errors is False


def test_init_without_loader_reports_script_error(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    engine = SoulcastEngine()
    engine.init(tmp_path)
    assert engine.scripting.had_errors is True


def test_init_resets_color_mode(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    engine = SoulcastEngine(loader=Rom())
    engine.drawing.set_color_mode(ColorMode.DIRECT)
    engine.init(tmp_path)
    assert engine.drawing.color_mode is ColorMode.INDIRECT


def test_release(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    engine = SoulcastEngine(loader=Rom())
    engine.init(tmp_path)
    engine.release()
    assert engine.initialized is False