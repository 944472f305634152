# config.py

from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from typing import Any, Dict, Optional
import json
import sys
import os

# Name of the JSON config file looked up in the working directory and its ancestors
CONFIG_FILE_NAME = ".mlaa"


class BlendSpace(str, Enum):
    """Space in which gradient and corner colors are interpolated."""
    LINEAR = "linear"     # decode sRGB, blend in linear light, re-encode
    ENCODED = "encoded"   # blend the stored 8-bit values directly


def _coerce_bool(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower() in ('true', '1', 't', 'y')
    return value


@dataclass(frozen=True)
class MlaaOptions:
    """
    Options for a single MLAA scan.

    The three family flags gate the vertical pass, the horizontal pass and the
    corner table independently. `strict_mode` requires a neighboring seam to
    repeat the exact color pair; relaxed matching lets one side change.
    `seam_split_position` (0.0-1.0) slides the gradient start along the seam
    and shortens it accordingly. `seam_brightness_balance` rejects neighbors
    whose light/dark ordering is the opposite of the seam's.
    """
    vertical_gradients: bool = True
    horizontal_gradients: bool = True
    corners: bool = True

    strict_mode: bool = True
    seam_split_position: float = 0.0
    seam_brightness_balance: bool = False

    def __post_init__(self):
        split = max(0.0, min(1.0, float(self.seam_split_position)))
        object.__setattr__(self, "seam_split_position", split)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MlaaOptions":
        field_map = {f.name: f for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in field_map:
                print(f"Warning: Unrecognized MLAA option '{key}' found in loaded data. Skipping.", file=sys.stderr)
                continue
            if field_map[key].type is bool or field_map[key].type == "bool":
                value = _coerce_bool(value)
            kwargs[key] = value
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            print(f"Warning: Invalid MLAA options {kwargs}: {e}. Using defaults.", file=sys.stderr)
            return cls()


@dataclass
class Config:
    """
    Application configuration for the image tool.
    The MLAA core only ever sees `mlaa_options`; the rest drives the adapters.
    """
    mlaa_options: MlaaOptions = field(default_factory=MlaaOptions)
    blend_space: BlendSpace = BlendSpace.LINEAR
    use_numba_jit: bool = True

    log_dir: str = ""        # empty disables the per-run text log
    run_log_file: str = ""   # empty disables the JSON Lines run ledger

    def __post_init__(self):
        if isinstance(self.mlaa_options, dict):
            self.mlaa_options = MlaaOptions.from_dict(self.mlaa_options)
        self.blend_space = BlendSpace(self.blend_space)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["blend_space"] = self.blend_space.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        config_instance = cls()
        field_map = {f.name: f for f in fields(cls)}

        for key, value in data.items():
            if key not in field_map:
                print(f"Warning: Unrecognized config key '{key}' found in loaded data. Skipping.", file=sys.stderr)
                continue

            if key == 'mlaa_options':
                if isinstance(value, dict):
                    config_instance.mlaa_options = MlaaOptions.from_dict(value)
                else:
                    print(f"Warning: Expected an object for 'mlaa_options', got {type(value).__name__}. Using defaults.", file=sys.stderr)
            elif key == 'blend_space':
                try:
                    config_instance.blend_space = BlendSpace(str(value).lower())
                except ValueError:
                    print(f"Warning: Unknown blend space '{value}'. Using '{config_instance.blend_space.value}'.", file=sys.stderr)
            else:
                if field_map[key].type in (bool, "bool"):
                    value = _coerce_bool(value)
                setattr(config_instance, key, value)
        return config_instance

    def save(self, filepath: str):
        os.makedirs(os.path.dirname(filepath) or ".", exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=4)

    @classmethod
    def load(cls, filepath: str) -> "Config":
        if not os.path.exists(filepath):
            print(f"Config file not found: {filepath}. Creating default config and saving it.", file=sys.stderr)
            default_config = cls()
            try:
                default_config.save(filepath)
            except OSError as e:
                print(f"Error saving default config to {filepath}: {e}", file=sys.stderr)
            return default_config

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error decoding JSON from config file '{filepath}': {e}. Using default config.", file=sys.stderr)
            return cls()

        if not isinstance(data, dict):
            print(f"Config file '{filepath}' does not contain a JSON object. Using default config.", file=sys.stderr)
            return cls()
        return cls.from_dict(data)


def find_config_file(start_dir: Optional[str] = None) -> Optional[str]:
    """
    Returns the nearest `.mlaa` file in `start_dir` (default: the working
    directory) or any of its ancestors, or None.
    """
    search_dir = os.path.abspath(start_dir or os.getcwd())
    while True:
        candidate = os.path.join(search_dir, CONFIG_FILE_NAME)
        if os.path.isfile(candidate):
            return candidate
        parent = os.path.dirname(search_dir)
        if parent == search_dir:
            return None
        search_dir = parent
