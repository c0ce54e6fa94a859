"""
Tests für die Block Registry (advance, cull, spawn, column guard)
"""
import pytest

from blockfall.block import BlockView
from blockfall.registry import BlockRegistry

RED = (225, 0, 0)
BLUE = (0, 0, 255)


@pytest.fixture
def registry():
    return BlockRegistry(rows=15, group_size=5, spawn_offset=4)


def test_spawn_group_rows_and_color(registry):
    group = registry.spawn_group(3, RED)

    assert len(group) == 5
    assert [block.row for block in group] == [4.0, 3.0, 2.0, 1.0, 0.0]
    assert all(block.column == 3 for block in group)
    assert all(block.color == RED for block in group)
    assert len(registry) == 5


def test_spawn_appends_without_removing(registry):
    registry.spawn_group(1, RED)
    registry.spawn_group(2, BLUE)

    columns = [block.column for block in registry.snapshot()]
    assert columns == [1] * 5 + [2] * 5


def test_advance_moves_every_block(registry):
    registry.spawn_group(0, RED)
    before = registry.snapshot()

    after = registry.advance(0.05)

    for old, new in zip(before, after):
        assert new.row == pytest.approx(old.row + 0.05)
        assert new.column == old.column
        assert new.color == old.color


def test_cull_removes_exactly_at_boundary(registry):
    registry.spawn_group(0, RED)  # Zeilen 4..0
    registry.advance(10.0)       # Zeilen 14..10

    assert len(registry.cull()) == 5

    registry.advance(1.0)        # Zeilen 15..11
    remaining = registry.cull()
    assert [block.row for block in remaining] == [14.0, 13.0, 12.0, 11.0]


def test_cull_preserves_order(registry):
    registry.spawn_group(5, RED)
    registry.advance(3.0)
    registry.spawn_group(6, BLUE)
    registry.advance(8.0)  # erste Gruppe: 15..11, zweite: 12..8

    remaining = registry.cull()
    assert [(b.column, b.row) for b in remaining] == [
        (5, 14.0), (5, 13.0), (5, 12.0), (5, 11.0),
        (6, 12.0), (6, 11.0), (6, 10.0), (6, 9.0), (6, 8.0)
    ]


def test_column_blocked_right_after_spawn(registry):
    assert not registry.is_column_blocked(7)

    registry.spawn_group(7, RED)

    assert registry.is_column_blocked(7)
    assert not registry.is_column_blocked(8)


def test_column_unblocked_once_group_passed_threshold(registry):
    registry.spawn_group(7, RED)
    registry.advance(4.95)
    assert registry.is_column_blocked(7)  # letzter Block bei 4.95 < 5

    registry.advance(0.05)
    assert not registry.is_column_blocked(7)


def test_custom_block_threshold():
    registry = BlockRegistry(rows=15, group_size=5, spawn_offset=4, block_threshold=2)
    registry.spawn_group(1, RED)
    registry.advance(2.0)

    assert not registry.is_column_blocked(1)


def test_second_spawn_same_column_rejected(registry):
    assert registry.try_spawn(7, lambda: RED) is True
    assert registry.try_spawn(7, lambda: BLUE) is False

    assert len(registry) == 5
    assert all(block.color == RED for block in registry)


def test_group_falls_out_after_300_steps(registry):
    registry.spawn_group(3, RED)

    for step in range(1, 301):
        registry.advance(0.05)
        registry.cull()
        if step == 299:
            # Unterster Block (Start 0) steht bei 14.95 und lebt noch
            assert len(registry) == 1

    assert len(registry) == 0


def test_culled_blocks_never_reappear(registry):
    registry.spawn_group(0, RED)
    sizes = []
    for _ in range(400):
        registry.advance(0.05)
        sizes.append(len(registry.cull()))

    assert sizes == sorted(sizes, reverse=True)
    assert sizes[-1] == 0


def test_snapshot_is_read_only(registry):
    registry.spawn_group(2, RED)
    snapshot = registry.snapshot()

    assert isinstance(snapshot, tuple)
    assert all(isinstance(block, BlockView) for block in snapshot)
    with pytest.raises(AttributeError):
        snapshot[0].row = 99.0

    registry.advance(1.0)
    assert snapshot[0].row == 4.0


def test_clear(registry):
    registry.spawn_group(2, RED)
    registry.clear()

    assert len(registry) == 0
    assert not registry.is_column_blocked(2)


def test_rejected_spawn_never_picks_a_color(registry):
    picked = []

    def pick_color():
        picked.append(BLUE)
        return BLUE

    registry.spawn_group(7, RED)

    assert registry.try_spawn(7, pick_color) is False
    assert picked == []

    assert registry.try_spawn(8, pick_color) is True
    assert picked == [BLUE]


@pytest.mark.parametrize('delta', [1e-10, 0.1234567891234])
def test_advance_adds_exact_increment(registry, delta):
    registry.spawn_group(0, RED)
    before = registry.snapshot()

    after = registry.advance(delta)

    for old, new in zip(before, after):
        assert new.row > old.row
        assert new.row == old.row + delta


def test_tiny_fall_speed_still_reaches_bottom():
    registry = BlockRegistry(rows=1, group_size=1, spawn_offset=0)
    registry.spawn_group(0, RED)

    registry.advance(1e-10)
    assert registry.snapshot()[0].row > 0.0
    assert registry.is_column_blocked(0)

    registry.advance(1.0 - 1e-10)
    assert len(registry.cull()) == 0
