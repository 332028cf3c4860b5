import pytest
import numpy as np

from molsimkit.core.exceptions import FileOpenError
from molsimkit.core.frame import Frame
from molsimkit.io.backends import NpyBackend, OvitoBackend, open_backend

from conftest import BOX_LENGTH, make_positions, write_npy_trajectory


def test_npy_backend_sequential_reads(npy_trajectory):
    expected = make_positions(10, 4)
    with NpyBackend(npy_trajectory) as backend:
        assert backend.raw_frame_count() == 10
        assert backend.position == 0
        frame = backend.read()
        assert backend.position == 1
        np.testing.assert_array_equal(frame.positions, expected[0])
        np.testing.assert_array_equal(frame.unitcell, np.eye(3) * BOX_LENGTH)
        backend.read_into(frame)
        assert backend.position == 2
        np.testing.assert_array_equal(frame.positions, expected[1])
    assert backend.closed


def test_read_past_end_raises_eof(tmp_path):
    path = write_npy_trajectory(tmp_path, n_frames=2)
    backend = NpyBackend(path)
    frame = backend.read()
    backend.read_into(frame)
    with pytest.raises(EOFError):
        backend.read_into(frame)


def test_advance_discards_intermediate_frames(npy_trajectory, counting_backend):
    backend = counting_backend(npy_trajectory)
    frame = backend.read()
    backend.advance(frame, 4)
    assert backend.position == 5
    assert counting_backend.reads == 5
    assert frame.positions[0, 0] == 5
    backend.advance(frame, 0)
    assert backend.position == 5


def test_read_after_close_raises(npy_trajectory):
    backend = NpyBackend(npy_trajectory)
    backend.close()
    with pytest.raises(ValueError, match="closed"):
        backend.read()


def test_reopen_starts_from_beginning(npy_trajectory):
    backend = NpyBackend(npy_trajectory)
    backend.read()
    backend.read()
    backend.close()
    fresh = backend.reopen()
    assert fresh.position == 0
    assert fresh.read().positions[0, 0] == 1


def test_npy_frames_carry_no_timestep(npy_trajectory):
    backend = NpyBackend(npy_trajectory)
    frame = backend.read()
    assert frame.step is None
    backend.read_into(frame)
    assert frame.step is None


def test_missing_box_gives_empty_unitcell(tmp_path):
    path = write_npy_trajectory(tmp_path, n_frames=3, box=False)
    frame = NpyBackend(path).read()
    assert not frame.has_unitcell
    np.testing.assert_array_equal(frame.unitcell, np.zeros((3, 3)))


def test_per_frame_box(tmp_path):
    path = write_npy_trajectory(tmp_path, n_frames=3, box=False)
    boxes = np.stack([np.eye(3) * (10 + i) for i in range(3)])
    np.save(tmp_path / "traj.box_matrix.npy", boxes)
    backend = NpyBackend(path)
    frame = backend.read()
    backend.read_into(frame)
    np.testing.assert_array_equal(frame.unitcell, np.eye(3) * 11)


@pytest.mark.parametrize("bad_positions", [
    np.zeros((3, 4)),
    np.zeros((3, 4, 2)),
    np.zeros((0, 4, 3)),
])
def test_malformed_positions(tmp_path, bad_positions):
    path = tmp_path / "bad.positions.npy"
    np.save(path, bad_positions)
    with pytest.raises(FileOpenError):
        NpyBackend(path)


def test_unreadable_file(tmp_path):
    path = tmp_path / "garbage.npy"
    path.write_text("not a numpy file")
    with pytest.raises(FileOpenError):
        NpyBackend(path)


def test_open_backend_selects_by_suffix(npy_trajectory):
    backend = open_backend(npy_trajectory)
    assert isinstance(backend, NpyBackend)
    backend.close()


def test_open_backend_missing_file(tmp_path):
    with pytest.raises(FileOpenError, match="not found"):
        open_backend(tmp_path / "nothing.dump")


def test_frame_update_rejects_atom_count_change():
    frame = Frame(np.zeros((3, 3)), np.eye(3))
    with pytest.raises(ValueError, match="atoms"):
        frame.update(np.zeros((4, 3)), np.eye(3))


def test_ovito_backend_reads_xyz(tmp_path):
    pytest.importorskip("ovito")
    path = tmp_path / "traj.xyz"
    with open(path, 'w') as f:
        for r in range(1, 4):
            f.write('2\nLattice="10 0 0 0 10 0 0 0 10" Properties=species:S:1:pos:R:3\n')
            f.write(f"H {r:.1f} 0.0 0.0\n")
            f.write(f"H {r:.1f} 1.0 0.0\n")
    backend = open_backend(path)
    assert isinstance(backend, OvitoBackend)
    assert backend.raw_frame_count() == 3
    frame = backend.read()
    backend.advance(frame, 2)
    assert backend.position == 3
    assert frame.positions[0, 0] == pytest.approx(3.0)
    backend.close()
