import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


CANONICAL_MAPS = {
    "mixed": """\
#######
#.G...#
#...EG#
#.#.#G#
#..G#E#
#.....#
#######
""",
    "elf_stronghold": """\
#######
#G..#E#
#E#E.E#
#G.##.#
#...#E#
#...E.#
#######
""",
    "elf_corner": """\
#######
#E..EG#
#.#G.E#
#E.##E#
#G..#.#
#..E#.#
#######
""",
    "goblin_pocket": """\
#######
#E.G#.#
#.#G..#
#G.#.G#
#G..#.#
#...E.#
#######
""",
    "corridor": """\
#######
#.E...#
#.#..G#
#.###.#
#E#G#G#
#...#G#
#######
""",
    "open_field": """\
#########
#G......#
#.E.#...#
#..##..G#
#...##..#
#...#...#
#.G...G.#
#.....G.#
#########
""",
}


@pytest.fixture
def canonical_maps():
    """Reference maps with well-known outcomes at default attack power."""
    return dict(CANONICAL_MAPS)
