#!/usr/bin/env python3
"""
Copyright (c) 2025 Aaron Baca

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

# run_mlaa.py

"""
Command line front end: anti-alias one image.

    python run_mlaa.py -i sprite.png -o sprite_aa.png
    cat sprite.png | python run_mlaa.py > sprite_aa.png

Without --config, the nearest `.mlaa` JSON file in the working directory or
its ancestors is used; failing that, defaults.
"""

import argparse
import sys
from typing import List, Optional

import image_codec
import run_logger
from config import BlendSpace, Config, find_config_file
from logger import Logger
from mlaa_features import count_features
from mlaa_image import apply_mlaa


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Morphological anti-aliasing for pixel art and flat-color images.'
    )
    parser.add_argument(
        '--input', '-i',
        dest='input_path',
        help='Input image (default: PNG from stdin)'
    )
    parser.add_argument(
        '--output', '-o',
        dest='output_path',
        help='Output image; format follows the extension (default: PNG to stdout)'
    )
    parser.add_argument(
        '--config', '-c',
        dest='config_path',
        help='JSON config file (default: nearest .mlaa file)'
    )
    parser.add_argument(
        '--blend-space',
        choices=[space.value for space in BlendSpace],
        help='Override the blend space from the config'
    )
    return parser


def resolve_config(config_path: Optional[str]) -> Config:
    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        print("run_mlaa: Using default MLAA options", file=sys.stderr)
        return Config()
    print(f"run_mlaa: Using config file \"{config_path}\"", file=sys.stderr)
    return Config.load(config_path)


def process_image(input_path: Optional[str], output_path: Optional[str], config: Config, logger: Logger) -> dict:
    """Loads, anti-aliases and saves one image. Returns feature counts per kind."""
    rgba = image_codec.load_image(input_path)
    logger.log(f"Loaded {input_path or '<stdin>'} ({rgba.shape[1]}x{rgba.shape[0]})")

    output, features = apply_mlaa(rgba, config.mlaa_options, config.blend_space, config.use_numba_jit)
    counts = count_features(features)
    logger.log_feature_counts(input_path or '<stdin>', counts)

    image_codec.save_image(output, output_path)
    logger.log(f"Wrote {output_path or '<stdout>'}")
    return counts


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args.config_path)
        if args.blend_space:
            config.blend_space = BlendSpace(args.blend_space)

        logger = Logger(config.log_dir or None)
        logger.log_config(config)

        run_logger.set_config_reference(config)
        run_index = run_logger.get_last_run_index() + 1

        counts = process_image(args.input_path, args.output_path, config, logger)

        run_logger.log_run(run_index, args.input_path, args.output_path, counts, config.to_dict())
        logger.log_total_time()
    except (OSError, ValueError) as e:
        print(f"run_mlaa: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
