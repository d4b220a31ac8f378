#!/usr/bin/env python3
"""Interactive viewer for the preset scenes.

Usage:
    python -m examples.interactive_scenes [--width W] [--height H] [--depth D] [--scene N]

Controls:
    1, 2    Show preset scene 1 or 2
    s       Save the current image as a timestamped PNG
    q, Esc  Quit

Each key press that changes the scene re-renders the whole image once.
"""

from __future__ import annotations

import argparse
import platform
import sys
from pathlib import Path

# Ensure the src/ directory is importable for direct execution
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

import taichi as ti  # noqa: E402

from whitted.config import DEFAULT_DEPTH_BUDGET  # noqa: E402


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    if platform.system() == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    # CUDA on Linux/Windows, Vulkan as fallback
    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Interactive Whitted ray tracer preview.")
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=800, help="Window height (default: 800)")
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_DEPTH_BUDGET,
        help=f"Reflection depth budget (default: {DEFAULT_DEPTH_BUDGET})",
    )
    parser.add_argument("--scene", type=int, default=1, help="Initial preset scene (default: 1)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the interactive viewer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    args = parse_args(argv)

    # Initialize Taichi first (before importing modules that declare fields)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from whitted.preview.interactive import InteractivePreview

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.", file=sys.stderr)
        print("Use examples/render_scene.py to render to a file instead.", file=sys.stderr)
        return 1

    try:
        preview = InteractivePreview(
            args.width,
            args.height,
            depth_budget=args.depth,
            initial_preset=args.scene,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Opening {args.width}x{args.height} window...")
    print("  - Press 1 or 2 to switch scenes")
    print("  - Press s to save a PNG")
    print("  - Press q or Esc to quit")
    print()

    try:
        preview.run()
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
