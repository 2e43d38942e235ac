"""Unit tests for tablefetch.utils.naming module."""
import pytest

from tablefetch.utils.naming import convert_to_valid_file_name, join_note_path


class TestConvertToValidFileName:
    """Test convert_to_valid_file_name function."""

    @pytest.mark.unit
    def test_each_forbidden_character_becomes_hyphen(self):
        assert convert_to_valid_file_name("Hello/World:Test*") == "Hello-World-Test-"

    @pytest.mark.unit
    @pytest.mark.parametrize("char", list("/|\\:'\"()（）{}<>.*"))
    def test_full_character_class(self, char):
        assert convert_to_valid_file_name(f"a{char}b") == "a-b"

    @pytest.mark.unit
    def test_trims_surrounding_whitespace_only(self):
        assert convert_to_valid_file_name("  Notes (draft)  ") == "Notes -draft-"

    @pytest.mark.unit
    def test_plain_title_unchanged(self):
        assert convert_to_valid_file_name("Reading list 2024") == "Reading list 2024"

    @pytest.mark.unit
    def test_non_ascii_kept(self):
        assert convert_to_valid_file_name("读书笔记（一）") == "读书笔记-一-"

    @pytest.mark.unit
    def test_empty_title(self):
        assert convert_to_valid_file_name("") == ""


class TestJoinNotePath:

    @pytest.mark.unit
    def test_root_only(self):
        assert join_note_path("Notes", "") == "Notes"

    @pytest.mark.unit
    def test_with_sub_folder(self):
        assert join_note_path("Notes", "Books") == "Notes/Books"

    @pytest.mark.unit
    def test_empty_root_keeps_leading_separator(self):
        assert join_note_path("", "Books") == "/Books"
