from __future__ import annotations

from disktally.kinds import IMAGE_EXTENSIONS, file_extension, is_image


def test_image_extension_set():
    assert IMAGE_EXTENSIONS == {".jpg", ".jpeg", ".png", ".gif", ".bmp", ".tiff", ".tif", ".svg", ".ico"}


def test_classification_boundary_case_insensitive():
    names = ["a.JPG", "a.jpg", "a.jpeg", "a.txt", "a"]
    assert [n for n in names if is_image(n)] == ["a.JPG", "a.jpg", "a.jpeg"]


def test_classification_boundary_case_sensitive():
    names = ["a.JPG", "a.jpg", "a.jpeg", "a.txt", "a"]
    assert [n for n in names if is_image(n, case_sensitive=True)] == ["a.jpg", "a.jpeg"]


def test_extension_is_last_suffix_of_basename():
    assert file_extension("/some/dir.png/photo") == ""
    assert file_extension("archive.png.txt") == ".txt"
    assert file_extension("/x/y/holiday.Tiff") == ".Tiff"
    assert is_image("/x/y/holiday.Tiff")
    assert not is_image("/x/y/archive.png.txt")
