"""Tests for Workspace."""
import pytest

from helpers import FakeLogger
from vibecheckr.core.domain.exceptions import CleanupWarning
from vibecheckr.core.ports import DefaultTokenGenerator
from vibecheckr.infra import workspace as workspace_module
from vibecheckr.infra.workspace import Workspace


class CountingTokens:
    def __init__(self, *tokens):
        self._tokens = list(tokens)

    def generate(self):
        return self._tokens.pop(0)


def test_create_makes_unique_directory(tmp_path):
    ws = Workspace(base_dir=tmp_path / "workspaces", token_gen=DefaultTokenGenerator(), logger=FakeLogger())

    first = ws.create()
    second = ws.create()

    assert first.path.is_dir()
    assert second.path.is_dir()
    assert first.path != second.path
    assert first.path.parent == tmp_path / "workspaces"
    assert first.path.name == first.request_id


def test_create_refuses_existing_directory(tmp_path):
    ws = Workspace(base_dir=tmp_path, token_gen=CountingTokens("same", "same"), logger=FakeLogger())
    ws.create()

    with pytest.raises(FileExistsError):
        ws.create()


def test_remove_deletes_tree(tmp_path):
    ws = Workspace(base_dir=tmp_path, token_gen=DefaultTokenGenerator(), logger=FakeLogger())
    workdir = ws.create()
    (workdir.path / "nested").mkdir()
    (workdir.path / "nested" / "file.txt").write_text("x", encoding="utf-8")

    ws.remove(workdir)

    assert not workdir.path.exists()


def test_remove_failure_raises_cleanup_warning(tmp_path, monkeypatch):
    ws = Workspace(base_dir=tmp_path, token_gen=DefaultTokenGenerator(), logger=FakeLogger())
    workdir = ws.create()

    def boom(path):
        raise PermissionError("locked")

    monkeypatch.setattr(workspace_module, "rmtree_force", boom)

    with pytest.raises(CleanupWarning) as exc_info:
        ws.remove(workdir)

    assert exc_info.value.path == str(workdir.path)


def test_token_format():
    token = DefaultTokenGenerator().generate()

    millis, random_part = token.split("-")
    assert millis.isdigit()
    assert len(random_part) == 8
