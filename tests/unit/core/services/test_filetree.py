from __future__ import annotations

"""
Unit tests for the Filetree Navigation Service.

Verifies:
1. Keyboard navigation, focus gating and key bindings.
2. Reveal-by-path (open_path) and the expand set.
3. Selection and expand state surviving structural mutation.
4. Command dispatch for every external command record.
5. The fatal selection invariant.
"""

from pathlib import Path

import pytest

from filenav.core.analysis.projection import build_projection
from filenav.core.services.filetree import Filetree
from filenav.domain.errors import InvalidLocation, NotFound, SelectionInvariantError
from filenav.domain.events import (
    Add,
    AddFile,
    Delete,
    FilterFor,
    GotoFile,
    Move,
    Rename,
    RemoveSelected,
)
from filenav.domain.tree_models import DirectoryNode, FileNode


@pytest.fixture
def tree(abcd_root: Path) -> Filetree:
    return Filetree.from_dir(str(abcd_root))


@pytest.fixture
def project_tree(project_root: Path) -> Filetree:
    return Filetree.from_dir(str(project_root))


def _labels(items) -> list:
    out = []

    def walk(level, prefix):
        for item in level:
            label = f"{prefix}{item.label}"
            out.append(label)
            walk(item.children, label + "/")

    walk(items, "")
    return out


def _assert_rows_resolve(tree: Filetree) -> None:
    for location in tree.state.visible(tree.items):
        assert tree.get_node(location) is not None


# -----------------------------------------------------------------------------
# Navigation
# -----------------------------------------------------------------------------

def test_initial_selection_is_first_row(tree: Filetree) -> None:
    assert tree.state.selected == (0,)
    assert tree.get_selected().name == "a"
    assert tree.focused is True


def test_first_then_up_never_moves(tree: Filetree) -> None:
    tree.down()
    tree.first()
    for _ in range(5):
        tree.up()
    assert tree.state.selected == (0,)


def test_last_then_down_never_moves(tree: Filetree) -> None:
    tree.toggle()  # 'a' is a file: no-op
    tree.last()
    assert tree.get_selected().name == "c"
    for _ in range(5):
        tree.down()
    assert tree.get_selected().name == "c"


def test_toggle_directory_reveals_children(tree: Filetree) -> None:
    tree.last()
    tree.toggle()
    tree.down()

    assert tree.get_selected().name == "d"
    assert tree.state.opened == {(2,)}


def test_toggle_file_is_noop(tree: Filetree) -> None:
    tree.toggle()
    assert tree.state.opened == set()


def test_get_node_is_pure_lookup(tree: Filetree) -> None:
    assert tree.get_node((2, 0)).name == "d"
    assert tree.get_node((0, 0)) is None
    assert tree.get_node(()) is None
    assert tree.get_node((7,)) is None


def test_handle_key_respects_focus_and_bindings(tree: Filetree) -> None:
    tree.focus(False)
    assert tree.handle_key("j") is False
    assert tree.state.selected == (0,)

    tree.focus(True)
    assert tree.handle_key("j") is True
    assert tree.state.selected == (1,)
    assert tree.handle_key("G") is True
    assert tree.state.selected == (2,)
    assert tree.handle_key("enter") is True
    assert (2,) in tree.state.opened
    assert tree.handle_key("F13") is False


def test_custom_key_bindings(abcd_root: Path) -> None:
    cfg = {"key_bindings": {"down": ["n"], "bogus": ["x"]}}
    tree = Filetree.from_dir(str(abcd_root), cfg)

    assert tree.handle_key("n") is True
    assert tree.state.selected == (1,)
    assert tree.handle_key("j") is False
    assert tree.handle_key("x") is False

# -----------------------------------------------------------------------------
# Reveal by path
# -----------------------------------------------------------------------------

def test_open_path_expands_every_ancestor(project_tree: Filetree, project_root: Path) -> None:
    target = project_root / "src" / "pkg" / "util.py"

    project_tree.open_path(str(target))

    assert project_tree.selected_path() == str(target)
    assert project_tree.state.selected == (2, 1, 1)
    assert {(2,), (2, 1)} <= project_tree.state.opened


def test_open_path_every_entry(project_tree: Filetree, project_root: Path) -> None:
    for rel in ["README.md", "docs/guide.md", "src", "src/pkg", "src/pkg/core.py"]:
        project_tree.open_path(rel)
        assert project_tree.selected_path() == str(project_root / rel)
        location = project_tree.state.selected
        for k in range(1, len(location)):
            assert location[:k] in project_tree.state.opened


def test_open_path_missing_raises(project_tree: Filetree, project_root: Path) -> None:
    with pytest.raises(NotFound):
        project_tree.open_path(str(project_root / "nope.txt"))
    with pytest.raises(NotFound):
        project_tree.open_path(str(project_root / "node_modules" / "lib.js"))

# -----------------------------------------------------------------------------
# Removal
# -----------------------------------------------------------------------------

def test_remove_selected_round_trip(tree: Filetree) -> None:
    removed = tree.remove_selected()

    assert removed.name == "a"
    assert _labels(tree.items) == ["b", "c", "c/d"]
    assert tree.items[1].is_dir
    assert tree.get_selected().name == "b"


@pytest.fixture
def two_dirs_root(tmp_path: Path) -> Path:
    root = tmp_path / "r"
    (root / "x").mkdir(parents=True)
    (root / "x" / "inner").write_text("", encoding="utf-8")
    (root / "y").mkdir()
    (root / "y" / "other").write_text("", encoding="utf-8")
    return root


def test_removed_dir_expansion_not_inherited(two_dirs_root: Path) -> None:
    tree = Filetree.from_dir(str(two_dirs_root))

    tree.toggle()
    assert (0,) in tree.state.opened

    tree.remove_selected()

    assert tree.get_selected().name == "y"
    assert (0,) not in tree.state.opened
    assert tree.state.visible(tree.items) == [(0,)]


def test_sibling_sliding_into_vacated_location_stays_expanded(two_dirs_root: Path) -> None:
    tree = Filetree.from_dir(str(two_dirs_root))
    tree.last()
    tree.toggle()
    tree.first()
    assert tree.state.opened == {(1,)}

    tree.remove_selected()

    assert tree.get_selected().name == "y"
    assert tree.state.opened == {(0,)}
    assert tree.state.visible(tree.items) == [(0,), (0, 0)]


def test_remove_last_child_selects_parent(tree: Filetree) -> None:
    tree.open_path("c/d")
    tree.remove_selected()

    assert tree.get_selected().name == "c"
    assert len(tree.get_selected()) == 0


def test_remove_last_row_selects_previous_sibling(tree: Filetree) -> None:
    tree.last()
    tree.remove_selected()
    assert tree.get_selected().name == "b"


def test_remove_invalid_location_keeps_state(tree: Filetree) -> None:
    with pytest.raises(InvalidLocation):
        tree.remove_file((5,))
    assert tree.state.selected == (0,)


def test_remove_everything_leaves_empty_selection(tree: Filetree) -> None:
    for _ in range(3):
        tree.first()
        tree.remove_selected()

    assert tree.items == []
    assert tree.state.selected == ()
    assert tree.get_selected() is None

# -----------------------------------------------------------------------------
# Reconciliation keeps selection and expand state
# -----------------------------------------------------------------------------

def test_delete_elsewhere_keeps_selected_node(tree: Filetree, abcd_root: Path) -> None:
    tree.last()
    tree.reconcile_delete(str(abcd_root / "a"))

    assert tree.state.selected == (1,)
    assert tree.get_selected().name == "c"
    _assert_rows_resolve(tree)


def test_delete_selected_moves_to_neighbour(tree: Filetree, abcd_root: Path) -> None:
    tree.down()
    tree.reconcile_delete(str(abcd_root / "b"))

    assert tree.get_selected().name == "c"


def test_rename_keeps_selection_and_expand(tree: Filetree, abcd_root: Path) -> None:
    tree.open_path("c/d")
    tree.reconcile_rename(str(abcd_root / "c"), str(abcd_root / "cc"))

    assert tree.selected_path() == str(abcd_root / "cc" / "d")
    assert tree.state.opened == {(2,)}


def test_move_reveals_moved_selection(tree: Filetree, abcd_root: Path) -> None:
    tree.reconcile_move(str(abcd_root / "a"), str(abcd_root / "c"))

    assert tree.selected_path() == str(abcd_root / "c" / "a")
    assert tree.state.selected == (1, 1)
    assert (1,) in tree.state.opened


def test_add_keeps_selection(tree: Filetree, abcd_root: Path) -> None:
    tree.down()
    node = tree.add_file((2,), "e")

    assert isinstance(node, FileNode)
    assert tree.get_selected().name == "b"


def test_add_into_empty_tree_selects_new_row(tmp_path: Path) -> None:
    tree = Filetree.from_dir(str(tmp_path))
    assert tree.get_selected() is None

    tree.add_dir((), "fresh")

    assert isinstance(tree.get_selected(), DirectoryNode)
    assert tree.state.selected == (0,)

# -----------------------------------------------------------------------------
# Filtering
# -----------------------------------------------------------------------------

def test_filter_and_clear(project_tree: Filetree, project_root: Path) -> None:
    before = project_tree.items

    project_tree.filter_include(["src/pkg/util.py"])

    assert _labels(project_tree.items) == ["src", "src/pkg", "src/pkg/util.py"]
    assert {(2,), (2, 1)} <= project_tree.state.opened
    assert project_tree.get_selected().name == "src"

    project_tree.clear_filter()

    assert project_tree.items == before
    assert project_tree.get_selected().name == "src"


def test_filter_with_no_match_has_no_selection(project_tree: Filetree) -> None:
    project_tree.filter_include(["ghost"])

    assert project_tree.items == []
    assert project_tree.get_selected() is None


def test_open_path_clears_hiding_filter(project_tree: Filetree, project_root: Path) -> None:
    project_tree.filter_include(["docs"])
    project_tree.open_path("src/main.py")

    assert project_tree.files.filter_paths is None
    assert project_tree.selected_path() == str(project_root / "src" / "main.py")

# -----------------------------------------------------------------------------
# Command dispatch
# -----------------------------------------------------------------------------

def test_dispatch_every_command(tree: Filetree, abcd_root: Path) -> None:
    tree.dispatch(Add(str(abcd_root / "n"), is_dir=True))
    tree.dispatch(AddFile((3,), "leaf"))
    tree.dispatch(Rename(str(abcd_root / "n"), str(abcd_root / "m")))
    tree.dispatch(Move(str(abcd_root / "b"), str(abcd_root / "m")))
    tree.dispatch(Delete(str(abcd_root / "c" / "d")))
    assert _labels(tree.items) == ["a", "c", "m", "m/leaf", "m/b"]

    tree.dispatch(GotoFile("m/b"))
    assert tree.selected_path() == str(abcd_root / "m" / "b")

    tree.dispatch(RemoveSelected())
    assert _labels(tree.items) == ["a", "c", "m", "m/leaf"]
    assert tree.get_selected().name == "leaf"

    tree.dispatch(FilterFor([str(abcd_root / "c")]))
    assert _labels(tree.items) == ["c"]
    tree.dispatch(FilterFor([]))
    assert tree.items == build_projection(tree.files.root)


def test_dispatch_unknown_command(tree: Filetree) -> None:
    with pytest.raises(TypeError):
        tree.dispatch("Delete")

# -----------------------------------------------------------------------------
# Selection invariant
# -----------------------------------------------------------------------------

def test_dangling_selection_is_fatal(tree: Filetree) -> None:
    tree.state.select((9,))
    with pytest.raises(SelectionInvariantError):
        tree.get_selected()


def test_hidden_selection_is_fatal_only_while_focused(tree: Filetree) -> None:
    tree.state.select((2, 0))
    with pytest.raises(SelectionInvariantError):
        tree.get_selected()

    tree.focus(False)
    assert tree.get_selected().name == "d"

# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def test_render_follows_expand_state(tree: Filetree) -> None:
    assert tree.render() == ["├── a", "├── b", "└── c/"]

    tree.expand_all()

    assert tree.render() == ["├── a", "├── b", "└── c/", "    └── d"]
