"""Unit tests for the upload naming policy and random token generation."""
import pytest

from filedrop.files.naming import (
    RANDOM_ALPHABET,
    RANDOM_NAME_LENGTH,
    decide_name,
    file_extension,
    random_string,
)


class TestRandomString:
    def test_length(self):
        assert len(random_string(10)) == 10

    def test_zero_length(self):
        assert random_string(0) == ""

    def test_negative_length_raises(self):
        with pytest.raises(ValueError):
            random_string(-1)

    def test_characters_come_from_alphabet(self):
        token = random_string(500)
        assert set(token) <= set(RANDOM_ALPHABET)

    def test_custom_alphabet(self):
        assert random_string(20, alphabet="ab").strip("ab") == ""

    def test_tokens_differ(self):
        assert len({random_string(RANDOM_NAME_LENGTH) for _ in range(50)}) == 50


class TestFileExtension:
    @pytest.mark.parametrize("name,expected", [
        ("img.png", ".png"),
        ("archive.tar.gz", ".gz"),
        ("README", ""),
        (".env", ".env"),
        ("dir.d/file", ""),
        ("./testdata/img.png", ".png"),
        ("trailing.", "."),
        ("", ""),
    ])
    def test_extension(self, name, expected):
        assert file_extension(name) == expected


class TestDecideName:
    def test_no_rename_keeps_original(self):
        assert decide_name("holiday photo.JPG", rename=False) == "holiday photo.JPG"

    def test_rename_keeps_extension(self):
        name = decide_name("photo.jpeg", rename=True)
        assert len(name) == RANDOM_NAME_LENGTH + len(".jpeg")
        assert name.endswith(".jpeg")
        assert file_extension(name) == ".jpeg"

    def test_rename_without_extension(self):
        name = decide_name("Makefile", rename=True)
        assert len(name) == RANDOM_NAME_LENGTH
        assert file_extension(name) == ""

    def test_rename_generates_fresh_names(self):
        assert decide_name("a.png", rename=True) != decide_name("a.png", rename=True)
