"""Tests for note and nested list dependencies."""

from pathlib import Path

import pytest

from todotree.todos import Dependency, DependencyMode, Todo, TodoList, sha1


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    path = tmp_path / "notes"
    path.mkdir()
    return path


def test_sha1_matches_known_digest():
    assert sha1("Note") == "2c924e3088204ee77ba681f72be3444357932fca"


class TestFromName:
    def test_empty_is_none(self):
        assert Dependency.from_name("").is_none

    def test_todo_suffix_is_list(self):
        dependency = Dependency.from_name("abc.todo")
        assert dependency.is_list
        assert dependency.content_hash == "abc"

    def test_bare_hash_is_note(self):
        assert Dependency.from_name("abc").mode == DependencyMode.NOTE

    def test_encode_and_marker(self):
        assert Dependency.from_name("abc").encode() == ">abc"
        assert Dependency().encode() == ""
        assert [d.marker() for d in (Dependency(), Dependency.from_name("a"))] == [
            ".",
            ">",
        ]


class TestRead:
    def test_reads_note_text(self, notes_dir):
        (notes_dir / "abc").write_text("remember the milk\n")
        dependency = Dependency.from_name("abc")
        dependency.read(notes_dir)
        assert dependency.note == "remember the milk\n"
        assert dependency.written

    def test_reads_nested_list_recursively(self, notes_dir):
        (notes_dir / "outer.todo").write_text("[2]>inner.todo second\n[1] first\n")
        (notes_dir / "inner.todo").write_text("[1]>leaf deep\n")
        (notes_dir / "leaf").write_text("bottom")

        dependency = Dependency.from_name("outer.todo")
        dependency.read(notes_dir)

        assert dependency.todo_list.messages() == ["first", "second"]
        inner = dependency.todo_list[1].nested
        assert inner is not None
        assert inner[0].note == "bottom"
        assert not dependency.todo_list.dirty

    def test_note_with_list_file_is_reclassified(self, notes_dir):
        (notes_dir / "abc.todo").write_text("[1] child\n")
        dependency = Dependency.from_name("abc")
        dependency.read(notes_dir)
        assert dependency.is_list
        assert dependency.name == "abc.todo"
        assert dependency.todo_list.messages() == ["child"]

    def test_missing_note_file_leaves_note_empty(self, notes_dir):
        dependency = Dependency.from_name("missing")
        dependency.read(notes_dir)
        assert dependency.is_note
        assert dependency.note == ""


class TestWrite:
    def test_note_written_once(self, notes_dir):
        dependency = Dependency.new_note("abc", "first")
        dependency.write(notes_dir)
        assert (notes_dir / "abc").read_text() == "first"

        (notes_dir / "abc").write_text("edited elsewhere")
        dependency.write(notes_dir)
        assert (notes_dir / "abc").read_text() == "edited elsewhere"

    def test_force_write_rewrites_note(self, notes_dir):
        dependency = Dependency.new_note("abc", "first")
        dependency.write(notes_dir)
        (notes_dir / "abc").write_text("edited elsewhere")
        dependency.force_write(notes_dir)
        assert (notes_dir / "abc").read_text() == "first"

    def test_empty_note_is_not_written(self, notes_dir):
        Dependency(DependencyMode.NOTE, "abc").force_write(notes_dir)
        assert not (notes_dir / "abc").exists()

    def test_new_list_is_written_even_when_empty(self, notes_dir):
        Dependency.new_list("abc").write(notes_dir)
        assert (notes_dir / "abc.todo").read_text() == ""

    def test_list_written_only_when_dirty(self, notes_dir):
        dependency = Dependency.new_list("abc")
        dependency.todo_list.push(Todo("child", 1))
        dependency.write(notes_dir)
        assert (notes_dir / "abc.todo").read_text() == "[1] child\n"

        (notes_dir / "abc.todo").write_text("[2] untouched\n")
        dependency.write(notes_dir)
        assert (notes_dir / "abc.todo").read_text() == "[2] untouched\n"


class TestDeleteFiles:
    def _build(self, notes_dir: Path) -> Dependency:
        (notes_dir / "outer.todo").write_text("[1]>inner.todo a\n[2]>note b\n")
        (notes_dir / "inner.todo").write_text("[1]>leaf c\n")
        (notes_dir / "leaf").write_text("x")
        (notes_dir / "note").write_text("y")
        return Dependency.from_name("outer.todo")

    def test_deletes_whole_subtree(self, notes_dir):
        dependency = self._build(notes_dir)
        dependency.read(notes_dir)
        assert dependency.delete_files(notes_dir) == 4
        assert list(notes_dir.iterdir()) == []

    def test_loads_unread_list_before_deleting(self, notes_dir):
        dependency = self._build(notes_dir)
        assert dependency.delete_files(notes_dir) == 4
        assert list(notes_dir.iterdir()) == []

    def test_keeps_referenced_names(self, notes_dir):
        dependency = self._build(notes_dir)
        dependency.read(notes_dir)
        assert dependency.delete_files(notes_dir, keep={"leaf"}) == 3
        assert [p.name for p in notes_dir.iterdir()] == ["leaf"]

    def test_missing_file_is_not_an_error(self, notes_dir):
        assert Dependency.new_note("gone", "text").delete_files(notes_dir) == 0

    def test_none_deletes_nothing(self, notes_dir):
        assert Dependency().delete_files(notes_dir) == 0


def test_mark_unwritten_marks_nested_lists_dirty():
    dependency = Dependency.new_list("abc")
    dependency.todo_list = TodoList([Todo("child", 1)])
    dependency.todo_list[0].attach_list()
    dependency.written = True

    dependency.mark_unwritten()

    assert not dependency.written
    assert dependency.todo_list.dirty
    assert dependency.todo_list[0].nested.dirty
