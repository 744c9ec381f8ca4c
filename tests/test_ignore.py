from distarchive.ignore import (
    IgnoreEntry,
    build_ignore_spec,
    read_ignore_entries,
    translate_entry,
    translate_ignore_file,
)
from distarchive.models import ArchiveFormat

MANIFEST = ".git\nnode_modules/\n# comment\n\n  .editorconfig  \n"


def _project(tmp_path):
    root = tmp_path / "hello-world"
    root.mkdir()
    (root / ".git").mkdir()
    (root / "node_modules").mkdir()
    return root


def test_read_ignore_entries(tmp_path):
    root = _project(tmp_path)
    entries = read_ignore_entries(root, MANIFEST)
    assert entries == [
        IgnoreEntry(".git", is_directory=True),
        IgnoreEntry("node_modules/", is_directory=True),
        IgnoreEntry("# comment", is_comment=True),
        IgnoreEntry(".editorconfig"),
    ]


def test_zip_patterns(tmp_path):
    root = _project(tmp_path)
    patterns, folder = translate_ignore_file(root, MANIFEST, ArchiveFormat.ZIP)
    assert patterns == ["*/.git/*", "*/node_modules/*", "*/.editorconfig"]
    assert folder == "hello-world"


def test_targz_patterns(tmp_path):
    root = _project(tmp_path)
    patterns, _ = translate_ignore_file(root, MANIFEST, ArchiveFormat.TARGZ)
    assert patterns == [".git/*", "node_modules/*", ".editorconfig"]


def test_git_file_is_not_a_directory(tmp_path):
    root = tmp_path / "hello-world"
    root.mkdir()
    (root / ".git").write_text("gitdir: ../.git/worktrees/x\n")
    patterns, _ = translate_ignore_file(root, ".git\nnode_modules/\n", ArchiveFormat.ZIP)
    assert patterns == ["*/.git", "*/node_modules/"]


def test_comments_and_blank_lines_emit_nothing(tmp_path):
    patterns, _ = translate_ignore_file(tmp_path, "# a\n\n   \n\t# b\n", ArchiveFormat.ZIP)
    assert patterns == []


def test_crlf_manifest(tmp_path):
    patterns, _ = translate_ignore_file(tmp_path, "a.txt\r\nb.txt\r\n", ArchiveFormat.TARGZ)
    assert patterns == ["a.txt", "b.txt"]


def test_directory_entry_invariants():
    entry = IgnoreEntry("vendor//", is_directory=True)
    zipped = translate_entry(entry, ArchiveFormat.ZIP)
    assert zipped.startswith("*/") and zipped.endswith("/*")
    assert zipped == "*/vendor/*"
    assert translate_entry(entry, ArchiveFormat.TARGZ) == "vendor/*"


def test_build_ignore_spec_skips_comments():
    entries = [IgnoreEntry("# node_modules", is_comment=True), IgnoreEntry("*.log")]
    spec = build_ignore_spec(entries)
    assert spec.match_file("debug.log")
    assert spec.match_file("logs/debug.log")
    assert not spec.match_file("node_modules/a.js")


def test_unstattable_entry_is_not_a_directory(tmp_path):
    long_name = "x" * 300
    patterns, _ = translate_ignore_file(tmp_path, long_name + "\n", ArchiveFormat.ZIP)
    assert patterns == ["*/" + long_name]
