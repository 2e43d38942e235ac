"""Unit tests for tablefetch.materialize module."""
from pathlib import Path
from unittest.mock import patch

import pytest

from tablefetch.config import MaterializeConfig
from tablefetch.materialize import MaterializeResult, NoteMaterializer
from tablefetch.notify import Notifier


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def materializer(tmp_path, notifier):
    return NoteMaterializer(tmp_path, MaterializeConfig(settle_delay=0), notifier)


class TestNotePath:

    @pytest.mark.unit
    def test_default_extension(self, materializer):
        folder, note = materializer.note_path_for({"Title": "A/B"}, "Notes")
        assert folder == "Notes"
        assert note == "Notes/A-B.md"

    @pytest.mark.unit
    def test_sub_folder(self, materializer):
        _, note = materializer.note_path_for({"Title": "T", "SubFolder": "Books"}, "Notes")
        assert note == "Notes/Books/T.md"

    @pytest.mark.unit
    def test_explicit_extension(self, materializer):
        _, note = materializer.note_path_for({"Title": "query", "Extension": "sql"}, "Notes")
        assert note == "Notes/query.sql"

    @pytest.mark.unit
    def test_missing_title(self, materializer):
        _, note = materializer.note_path_for({}, "Notes")
        assert note == "Notes/.md"


class TestWriteNotes:

    @pytest.mark.unit
    def test_creates_missing_notes_and_folders(self, materializer, tmp_path):
        result = materializer.materialize(
            [
                {"Title": "One", "MD": "# One"},
                {"Title": "Two", "SubFolder": "Deep/er", "MD": "two"},
                {"Title": "Empty"},
            ],
            "Notes",
        )

        assert (tmp_path / "Notes" / "One.md").read_text(encoding="utf-8") == "# One"
        assert (tmp_path / "Notes" / "Deep" / "er" / "Two.md").read_text(encoding="utf-8") == "two"
        assert (tmp_path / "Notes" / "Empty.md").read_text(encoding="utf-8") == ""
        assert result.created == 3
        assert result.updated == 0

    @pytest.mark.unit
    def test_overwrites_existing_notes_with_settle_delay(self, tmp_path, notifier):
        (tmp_path / "Notes").mkdir()
        (tmp_path / "Notes" / "One.md").write_text("old", encoding="utf-8")
        materializer = NoteMaterializer(tmp_path, MaterializeConfig(settle_delay=0.25), notifier)

        with patch("tablefetch.materialize.time.sleep") as mock_sleep:
            result = materializer.materialize([{"Title": "One", "MD": "new"}], "Notes")

        assert (tmp_path / "Notes" / "One.md").read_text(encoding="utf-8") == "new"
        assert result.updated == 1
        mock_sleep.assert_called_once_with(0.25)

    @pytest.mark.unit
    def test_no_settle_delay_for_new_notes(self, materializer):
        with patch("tablefetch.materialize.time.sleep") as mock_sleep:
            materializer.materialize([{"Title": "New"}], "Notes")
        mock_sleep.assert_not_called()

    @pytest.mark.unit
    def test_empty_root_writes_at_vault_top(self, materializer, tmp_path):
        materializer.materialize([{"Title": "Top", "MD": "x"}], "")
        assert (tmp_path / "Top.md").read_text(encoding="utf-8") == "x"

    @pytest.mark.unit
    def test_idempotent(self, materializer, tmp_path):
        notes = [{"Title": f"Note {i}", "SubFolder": "S" if i % 2 else "", "MD": f"body {i}"} for i in range(5)]

        materializer.materialize(notes, "Notes")
        first = {p: p.read_text(encoding="utf-8") for p in tmp_path.rglob("*.md")}
        second_result = materializer.materialize(notes, "Notes")
        second = {p: p.read_text(encoding="utf-8") for p in tmp_path.rglob("*.md")}

        assert first == second
        assert second_result.updated == 5
        assert second_result.created == 0


class TestHiddenPaths:

    @pytest.mark.unit
    def test_dot_root_existing_note_uses_plain_write(self, materializer, tmp_path):
        materializer.materialize([{"Title": "snippet", "Extension": "css", "MD": "a{}"}], ".config/snippets")

        with patch("tablefetch.materialize.time.sleep") as mock_sleep:
            result = materializer.materialize(
                [{"Title": "snippet", "Extension": "css", "MD": "b{}"}], ".config/snippets"
            )

        assert (tmp_path / ".config" / "snippets" / "snippet.css").read_text(encoding="utf-8") == "b{}"
        assert result.hidden_written == 1
        assert result.updated == 0
        mock_sleep.assert_not_called()

    @pytest.mark.unit
    def test_dot_root_write_failure_is_notified(self, materializer, notifier):
        materializer.materialize([{"Title": "x", "MD": "1"}], ".hidden")

        with patch.object(Path, "write_text", side_effect=OSError("read-only")):
            result = materializer.materialize([{"Title": "x", "MD": "2"}], ".hidden")

        assert result.failed == 1
        assert [n.message for n in notifier.of_kind("write_failed")] == ["Failed to write file: read-only"]


class TestFailures:

    @pytest.mark.unit
    def test_write_failure_skips_record_and_continues(self, materializer, notifier, tmp_path):
        real_write_text = Path.write_text

        def flaky(path, *args, **kwargs):
            if path.name == "Bad.md":
                raise OSError("disk full")
            return real_write_text(path, *args, **kwargs)

        with patch.object(Path, "write_text", autospec=True, side_effect=flaky):
            result = materializer.materialize([{"Title": "Bad"}, {"Title": "Good", "MD": "ok"}], "Notes")

        assert result.failed == 1
        assert result.created == 1
        assert (tmp_path / "Notes" / "Good.md").exists()
        assert len(notifier.of_kind("write_failed")) == 1


class TestBatches:

    @pytest.mark.unit
    def test_twenty_five_records(self, materializer, notifier):
        notes = [{"Title": f"n{i}"} for i in range(25)]

        materializer.materialize(notes, "Notes")

        progress = notifier.of_kind("batch_progress")
        assert [n.message for n in progress] == [
            "There are 15 files needed to be processed.",
            "There are 5 files needed to be processed.",
            "There are 0 files needed to be processed.",
        ]
        assert [n.message for n in notifier.of_kind("complete")] == ["All Finished."]
        assert notifier.of_kind("total")[0].message == "There are 25 files needed to be updated or created."

    @pytest.mark.unit
    def test_records_written_in_order(self, tmp_path, notifier):
        written = []
        materializer = NoteMaterializer(tmp_path, MaterializeConfig(batch_size=2, settle_delay=0), notifier)

        with patch.object(NoteMaterializer, "write_note", autospec=True,
                          side_effect=lambda self, note, root, result: written.append(note["Title"])):
            materializer.materialize([{"Title": t} for t in "abcde"], "Notes")

        assert written == list("abcde")
        assert len(notifier.of_kind("batch_progress")) == 3

    @pytest.mark.unit
    def test_no_records(self, materializer, notifier):
        result = materializer.materialize([], "Notes")

        assert result == MaterializeResult()
        assert notifier.of_kind("batch_progress") == []
        assert len(notifier.of_kind("complete")) == 1


class TestBadRecordsDoNotStopTheRun:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "bad_note",
        [
            {"Title": "a", "MD": "bad \ud800"},
            {"Title": "x" * 300, "MD": "long"},
            {"Title": "a\x00b", "MD": "nul"},
        ],
        ids=["lone-surrogate", "name-too-long", "embedded-nul"],
    )
    def test_sibling_still_written(self, materializer, notifier, tmp_path, bad_note):
        result = materializer.materialize([bad_note, {"Title": "b", "MD": "ok"}], "N")

        assert (tmp_path / "N" / "b.md").read_text(encoding="utf-8") == "ok"
        assert result.failed == 1
        assert result.created == 1
        assert len(notifier.of_kind("write_failed")) == 1
        assert [n.message for n in notifier.of_kind("complete")] == ["All Finished."]

    @pytest.mark.unit
    def test_encoding_failure_on_overwrite(self, materializer, notifier, tmp_path):
        materializer.materialize([{"Title": "a", "MD": "v1"}], "N")

        with patch("tablefetch.materialize.time.sleep") as mock_sleep:
            result = materializer.materialize(
                [{"Title": "a", "MD": "\udfff"}, {"Title": "c", "MD": "ok"}], "N"
            )

        assert result.failed == 1
        assert result.created == 1
        assert (tmp_path / "N" / "c.md").exists()
        mock_sleep.assert_not_called()

    @pytest.mark.unit
    def test_encoding_failure_on_hidden_overwrite(self, materializer, notifier):
        materializer.materialize([{"Title": "a", "MD": "v1"}], ".cfg")
        result = materializer.materialize([{"Title": "a", "MD": "\ud800"}], ".cfg")

        assert result.failed == 1
        assert result.hidden_written == 0
        assert len(notifier.of_kind("write_failed")) == 1

    @pytest.mark.unit
    def test_exists_check_failure_is_reported(self, materializer, notifier):
        with patch.object(Path, "exists", side_effect=OSError(36, "File name too long")):
            result = materializer.materialize([{"Title": "a"}], "")

        assert result.failed == 1
        assert notifier.of_kind("write_failed")[0].message == "Failed to write file: [Errno 36] File name too long"
