#!/usr/bin/env python3
"""Render a preset scene to a PNG file.

Usage:
    python -m examples.render_scene [options]

Options:
    --scene N           Preset scene number, 1 or 2 (default: 1)
    --width WIDTH       Image width in pixels (default: 800)
    --height HEIGHT     Image height in pixels (default: 800)
    --depth DEPTH       Reflection depth budget (default: 10)
    --output OUTPUT     Output file path (default: scene_<N>.png, or the
                        scene file name with .png)
    --scene-file PATH   Render a scene saved as JSON instead of a preset
    --save-scene PATH   Also write the rendered scene to a JSON file
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_scene --scene 2 --width 400 --height 400
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti

# Ensure the src/ directory is importable for direct execution
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from whitted.config import DEFAULT_DEPTH_BUDGET, RenderSettings  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset scene with the Whitted ray tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--scene",
        type=int,
        default=1,
        help="Preset scene number (default: 1)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=800,
        help="Image width in pixels (default: 800)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=800,
        help="Image height in pixels (default: 800)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_DEPTH_BUDGET,
        help=f"Reflection depth budget (default: {DEFAULT_DEPTH_BUDGET})",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output file path (default: scene_<N>.png or <scene-file stem>.png)",
    )
    parser.add_argument(
        "--scene-file",
        type=str,
        default=None,
        help="Render a scene from a JSON file instead of a preset",
    )
    parser.add_argument(
        "--save-scene",
        type=str,
        default=None,
        help="Write the rendered scene to a JSON file",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_scene(
    settings: RenderSettings,
    scene_number: int = 1,
    output_path: str | None = None,
    scene_file: str | None = None,
    save_scene: str | None = None,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render one scene and save it as a PNG.

    Args:
        settings: Image size, depth budget and gamma.
        scene_number: Preset to render when scene_file is not given.
        output_path: Output file path (PNG). Defaults to the scene file name
            with a .png suffix, or scene_<N>.png for presets.
        scene_file: Optional JSON scene description to render instead.
        save_scene: Optional path to write the scene description to.
        preview: If True, show the image with Matplotlib after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from whitted.core.renderer import RenderSession
    from whitted.preview.export import save_png
    from whitted.scene.presets import build_preset
    from whitted.scene.scene import Scene

    if scene_file is not None:
        with open(scene_file, encoding="utf-8") as f:
            scene = Scene.from_dict(json.load(f))
    else:
        scene = build_preset(scene_number)

    if save_scene is not None:
        with open(save_scene, "w", encoding="utf-8") as f:
            json.dump(scene.to_dict(), f, indent=2)

    if not quiet:
        print(
            f"Rendering '{scene.name or 'unnamed'}' ({len(scene)} shapes) at "
            f"{settings.width}x{settings.height}, depth {settings.depth_budget}..."
        )

    start_time = time.time()
    session = RenderSession.from_settings(settings)
    session.set_scene(scene)

    # Kernel launches are asynchronous on GPU backends
    ti.sync()
    render_time = time.time() - start_time

    if output_path is None:
        if scene_file is not None:
            output_path = f"{Path(scene_file).stem}.png"
        else:
            output_path = f"scene_{scene_number}.png"
    output_file = Path(output_path)
    save_png(session, str(output_file), gamma=settings.gamma)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Render time: {render_time:.2f}s")

    if preview:
        from whitted.preview.display import show_preview

        show_preview(session, gamma=settings.gamma)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        settings = RenderSettings(
            width=args.width,
            height=args.height,
            depth_budget=args.depth,
        )
        render_scene(
            settings,
            scene_number=args.scene,
            output_path=args.output,
            scene_file=args.scene_file,
            save_scene=args.save_scene,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
