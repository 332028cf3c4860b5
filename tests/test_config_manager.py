import pytest
import json
import yaml

from molsimkit.core.trajectory import FrameRange
from molsimkit.utils.config_manager import DEFAULT_CONFIG, ConfigManager


def test_defaults():
    cfg = ConfigManager()
    assert cfg.get_frame_range() == FrameRange()
    assert cfg.get_secondary_structure_config()['selection'] == 'protein'
    assert cfg.get_output_config()['directory'] == 'molsimkit_output'


def test_load_merges_over_defaults(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(yaml.dump({
        'trajectory': {'file': 'run.dump', 'first': 3, 'step': 2},
        'secondary_structure': {'selection': 'protein and resid 1:10'},
    }))
    cfg = ConfigManager(path)
    assert cfg.get_frame_range() == FrameRange(first=3, last=None, step=2)
    assert cfg.get_trajectory_config()['file'] == 'run.dump'
    assert cfg.get_secondary_structure_config()['show_progress'] is True


def test_defaults_are_not_shared():
    cfg = ConfigManager()
    cfg.update_config({'trajectory': {'first': 4}})
    assert DEFAULT_CONFIG['trajectory']['first'] == 1
    assert ConfigManager().get_frame_range().first == 1


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        ConfigManager("does_not_exist.yaml")


@pytest.mark.parametrize("updates", [
    {'trajectory': {'first': 0}},
    {'trajectory': {'step': 'two'}},
    {'trajectory': {'first': 5, 'last': 2}},
    {'secondary_structure': {'method': 'stride'}},
    {'output': {'directory': ''}},
    {'output': None},
])
def test_invalid_updates(updates):
    with pytest.raises(ValueError):
        ConfigManager.from_dict(updates)


def test_save_and_reload(tmp_path):
    cfg = ConfigManager.from_dict({'trajectory': {'file': 'a.npy', 'last': 8}})
    out = tmp_path / "saved.yaml"
    cfg.save_config(out)
    reloaded = ConfigManager(out)
    assert reloaded.to_dict() == cfg.to_dict()
    assert json.loads(reloaded.to_json())['trajectory']['last'] == 8
