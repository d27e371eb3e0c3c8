"""Tests for the veogen CLI."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from fakes import FakeVideoAdapter
from veogen.cli import commands
from veogen.errors import SubmissionRejected
from veogen.schemas.generation import VeoModel
from veogen.services.file_manager import FileManager

runner = CliRunner()


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render tables and messages without wrapping at 80 columns."""
    monkeypatch.setattr(commands, "console", Console(width=200))


@pytest.fixture
def cli_adapter(monkeypatch, tmp_path) -> FakeVideoAdapter:
    """Wire the CLI to a fake adapter and a temporary output directory."""
    adapter = FakeVideoAdapter(done_on_submit=True)
    monkeypatch.setattr(commands, "validate_credentials", lambda: None)
    monkeypatch.setattr(commands, "get_video_adapter", lambda: adapter)
    monkeypatch.setattr(commands, "FileManager", lambda: FileManager(tmp_path / "out"))
    return adapter


def test_modes_lists_every_mode():
    result = runner.invoke(commands.app, ["modes"])

    assert result.exit_code == 0
    assert "Story Mode" in result.stdout
    assert "References to Video" in result.stdout
    assert "extend_video (from a result)" in result.stdout


def test_generate_text_to_video(cli_adapter, tmp_path):
    result = runner.invoke(commands.app, ["generate", "--prompt", "A red fox"])

    assert result.exit_code == 0, result.stdout
    assert "Output:" in result.stdout
    assert len(cli_adapter.submissions) == 1
    assert cli_adapter.submissions[0].prompt == "A red fox"
    assert cli_adapter.closed
    assert list((tmp_path / "out").glob("*/step_1.mp4"))


def test_generate_story_applies_mode_locks(cli_adapter):
    result = runner.invoke(commands.app, [
        "generate", "--mode", "story",
        "--scene", "open", "--scene", "continue",
        "--model", VeoModel.VEO_FAST.value,
    ])

    assert result.exit_code == 0, result.stdout
    assert [s.prompt for s in cli_adapter.submissions] == ["open", "continue"]
    assert {s.model for s in cli_adapter.submissions} == {VeoModel.VEO.value}


def test_generate_with_labelled_reference(cli_adapter, tmp_path):
    ref = tmp_path / "hero.png"
    ref.write_bytes(b"fake-png-bytes")

    result = runner.invoke(commands.app, [
        "generate", "--mode", "references_to_video",
        "--prompt", "A chase",
        "--reference", f"{ref}=Hero",
    ])

    assert result.exit_code == 0, result.stdout
    submission = cli_adapter.submissions[0]
    assert submission.prompt == "A chase (Reference 1: Hero)"
    assert len(submission.config.reference_images) == 1


def test_generate_extend_uri(cli_adapter):
    uri = "https://generativelanguage.googleapis.com/v1beta/files/prior:download?alt=media"

    result = runner.invoke(commands.app, [
        "generate", "--mode", "extend_video", "--extend-uri", uri,
    ])

    assert result.exit_code == 0, result.stdout
    assert cli_adapter.submissions[0].video.uri == uri
    assert cli_adapter.submissions[0].config.aspect_ratio is None


def test_invalid_request_exits_before_submitting(cli_adapter):
    result = runner.invoke(commands.app, ["generate", "--mode", "references_to_video"])

    assert result.exit_code == 1
    assert "Please enter a prompt and add at least one asset." in result.stdout
    assert cli_adapter.call_count == 0


def test_missing_credentials_exit(monkeypatch):
    def fail():
        raise RuntimeError("No API key found for the Gemini API.")

    monkeypatch.setattr(commands, "validate_credentials", fail)

    result = runner.invoke(commands.app, ["generate", "--prompt", "A fox"])

    assert result.exit_code == 1
    assert "No API key found" in result.stdout


def test_generation_error_exits_nonzero(cli_adapter):
    cli_adapter.submit_error = SubmissionRejected("quota exceeded", status_code=429)

    result = runner.invoke(commands.app, ["generate", "--prompt", "A fox"])

    assert result.exit_code == 1
    assert "SubmissionRejected" in result.stdout
    assert cli_adapter.closed


def test_generate_frames_from_data_url(cli_adapter):
    result = runner.invoke(commands.app, [
        "generate", "--mode", "frames_to_video",
        "--start-frame", "data:image/jpeg;base64,aGVsbG8=",
        "--loop",
    ])

    assert result.exit_code == 0, result.stdout
    submission = cli_adapter.submissions[0]
    assert submission.image.image_bytes == b"hello"
    assert submission.image.mime_type == "image/jpeg"
    assert submission.config.last_frame.image_bytes == b"hello"


def test_non_image_data_url_is_rejected(cli_adapter):
    result = runner.invoke(commands.app, [
        "generate", "--mode", "frames_to_video",
        "--start-frame", "data:text/plain;base64,aGVsbG8=",
    ])

    assert result.exit_code == 2
    assert cli_adapter.call_count == 0


def test_missing_frame_file_is_rejected(cli_adapter, tmp_path):
    result = runner.invoke(commands.app, [
        "generate", "--mode", "frames_to_video",
        "--start-frame", str(tmp_path / "missing.png"),
    ])

    assert result.exit_code == 2
    assert cli_adapter.call_count == 0
