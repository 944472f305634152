import sys
import os
import json
import dataclasses
import pytest

# Add the root directory to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import CONFIG_FILE_NAME, BlendSpace, Config, MlaaOptions, find_config_file


def test_default_options_enable_everything_strict():
    options = MlaaOptions()
    assert options.vertical_gradients and options.horizontal_gradients and options.corners
    assert options.strict_mode
    assert options.seam_split_position == 0.0
    assert not options.seam_brightness_balance


@pytest.mark.parametrize("value, expected", [(-0.5, 0.0), (0.25, 0.25), (1.0, 1.0), (3.0, 1.0)])
def test_split_position_is_clamped(value, expected):
    assert MlaaOptions(seam_split_position=value).seam_split_position == expected


def test_options_are_immutable():
    options = MlaaOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.corners = False


def test_options_from_dict_coerces_and_skips(capsys):
    options = MlaaOptions.from_dict({
        "corners": "false",
        "strict_mode": "True",
        "seam_split_position": "0.5",
        "sharpen": True,
    })

    assert options == MlaaOptions(corners=False, strict_mode=True, seam_split_position=0.5)
    assert "sharpen" in capsys.readouterr().err


def test_config_accepts_plain_dict_options():
    config = Config(mlaa_options={"corners": False}, blend_space="encoded")
    assert config.mlaa_options == MlaaOptions(corners=False)
    assert config.blend_space is BlendSpace.ENCODED


def test_save_and_load_roundtrip(tmp_path):
    path = str(tmp_path / "cfg" / "mlaa.json")
    config = Config(
        mlaa_options=MlaaOptions(strict_mode=False, seam_split_position=0.75),
        blend_space=BlendSpace.ENCODED,
        use_numba_jit=False,
        log_dir="logs",
    )
    config.save(path)

    with open(path, encoding='utf-8') as f:
        assert json.load(f)["blend_space"] == "encoded"
    assert Config.load(path) == config


def test_load_missing_file_writes_defaults(tmp_path):
    path = str(tmp_path / "fresh.json")
    config = Config.load(path)

    assert config == Config()
    assert os.path.exists(path)


@pytest.mark.parametrize("contents", ["{ not json", "[1, 2, 3]"])
def test_load_unusable_file_returns_defaults(tmp_path, contents):
    path = tmp_path / "broken.json"
    path.write_text(contents, encoding='utf-8')
    assert Config.load(str(path)) == Config()


def test_from_dict_tolerates_bad_values(capsys):
    config = Config.from_dict({
        "blend_space": "cmyk",
        "mlaa_options": "everything",
        "use_numba_jit": "0",
        "colour": "red",
    })

    assert config.blend_space is BlendSpace.LINEAR
    assert config.mlaa_options == MlaaOptions()
    assert config.use_numba_jit is False
    err = capsys.readouterr().err
    assert "cmyk" in err and "colour" in err


def test_find_config_file_walks_up(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("{}", encoding='utf-8')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config_file(str(nested)) == str(tmp_path / CONFIG_FILE_NAME)


def test_find_config_file_prefers_nearest(tmp_path):
    (tmp_path / CONFIG_FILE_NAME).write_text("{}", encoding='utf-8')
    nested = tmp_path / "project"
    nested.mkdir()
    (nested / CONFIG_FILE_NAME).write_text("{}", encoding='utf-8')

    assert find_config_file(str(nested)) == str(nested / CONFIG_FILE_NAME)
