import pytest
from PIL import Image

from inpaint_mask_editor.history import MaskHistory


def _mask(marked=()):
    img = Image.new("RGBA", (4, 4), (0, 0, 0, 0))
    for xy in marked:
        img.putpixel(xy, (255, 0, 0, 255))
    return img


def test_reset_records_single_empty_entry():
    history = MaskHistory()
    assert history.index == -1
    history.reset(_mask())
    assert len(history) == 1
    assert history.index == 0
    assert not history.can_undo
    assert not history.can_redo


def test_undo_then_redo_restores_exact_raster():
    history = MaskHistory()
    history.reset(_mask())
    history.save_state(_mask([(0, 0)]))
    second = _mask([(0, 0), (3, 3)])
    history.save_state(second)

    previous = history.undo()
    assert previous.tobytes() == _mask([(0, 0)]).tobytes()
    restored = history.redo()
    assert restored.tobytes() == second.tobytes()


def test_undo_at_start_and_redo_at_end_are_noops():
    history = MaskHistory()
    history.reset(_mask())
    assert history.undo() is None
    assert history.index == 0
    history.save_state(_mask([(1, 1)]))
    assert history.redo() is None
    assert history.index == 1


def test_entries_are_isolated_from_callers():
    history = MaskHistory()
    snapshot = _mask()
    history.reset(snapshot)
    snapshot.putpixel((2, 2), (255, 0, 0, 255))
    current = history.current()
    assert current.getpixel((2, 2)) == (0, 0, 0, 0)
    current.putpixel((1, 1), (255, 0, 0, 255))
    assert history.current().getpixel((1, 1)) == (0, 0, 0, 0)


def test_new_state_discards_redo_branch():
    history = MaskHistory()
    history.reset(_mask())
    for x in range(3):
        history.save_state(_mask([(x, 0)]))
    history.undo()
    history.undo()
    index_before = history.index
    history.save_state(_mask([(3, 3)]))

    assert len(history) == index_before + 2
    assert history.index == len(history) - 1
    assert not history.can_redo
    assert history.redo() is None


def test_limit_evicts_oldest_and_keeps_current():
    history = MaskHistory(limit=3)
    history.reset(_mask())
    for x in range(4):
        history.save_state(_mask([(x, 1)]))
        assert len(history) <= 3

    assert len(history) == 3
    assert history.index == 2
    assert history.current().tobytes() == _mask([(3, 1)]).tobytes()
    history.undo()
    history.undo()
    assert history.undo() is None
    assert history.current().tobytes() == _mask([(1, 1)]).tobytes()


def test_default_limit_is_fifty():
    history = MaskHistory()
    history.reset(_mask())
    for _ in range(60):
        history.save_state(_mask([(0, 0)]))
    assert len(history) == 50
    assert history.index == 49


def test_rescale_resizes_every_entry():
    history = MaskHistory()
    history.reset(_mask())
    history.save_state(_mask([(1, 1)]))
    history.rescale((8, 8))
    assert history.current().size == (8, 8)
    assert history.current().getpixel((2, 2)) == (255, 0, 0, 255)
    history.undo()
    assert history.current().size == (8, 8)


def test_invalid_limit():
    with pytest.raises(ValueError):
        MaskHistory(limit=0)
