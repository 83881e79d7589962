"""
CLI entry point for the sacredscope visualizer.

Usage:
    sacredscope [options]                       live preview window
    sacredscope --headless -o out.gif [options] render to GIF / PNG frames
"""

import argparse
import os
import sys
import time
from pathlib import Path

from sacredscope.config import PROFILES, VisualizerConfig, load_config
from sacredscope.core.modes import VisualMode
from sacredscope.io.exporter import SessionExporter
from sacredscope.session import VisualizerSession
from sacredscope.visualizers.canvas import PygameCanvas

MODE_KEYS = list(VisualMode)


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def status_line(session: VisualizerSession) -> str:
    """One-line summary of the latest analysis tick."""
    snapshot = session.snapshot
    state = "playing" if session.running else "stopped"
    if snapshot is None:
        return f"{session.mode.value} | {state} | waiting for audio"
    f = snapshot.features
    return (
        f"{session.mode.value} | {state} | energy {f.energy * 100:3.0f}% | "
        f"mood {f.mood.value} | tempo {f.tempo:.0f} BPM | {snapshot.context.genre_hint.value}"
    )


def render_headless(
    session: VisualizerSession,
    canvas: PygameCanvas,
    duration: float,
    output_path: Path,
    progress_callback=None,
) -> Path:
    """
    Render ``duration`` seconds on a simulated clock and save with Pillow.

    A ``.gif`` output becomes one animated GIF; any other suffix is
    treated as a PNG frame sequence named ``<stem>_00000.png``.

    Returns:
        Path of the GIF, or of the directory holding the PNG frames.
    """
    from PIL import Image

    cfg = session.cfg
    size = (cfg.width, cfg.height)
    total_frames = max(1, int(duration * cfg.fps))

    images = []
    surface = None
    session.start(0.0)
    for i in range(total_frames):
        now = i / cfg.fps
        session.pump(now)
        surface = canvas.render_frame(session.render(now), size, previous_surface=surface)
        images.append(Image.fromarray(canvas.surface_to_array(surface)))
        if progress_callback:
            progress_callback(i + 1, total_frames)
    session.stop()

    output_path = Path(output_path)
    if output_path.suffix.lower() == ".gif":
        images[0].save(
            output_path,
            save_all=True,
            append_images=images[1:],
            duration=int(1000 / cfg.fps),
            loop=0,
        )
        return output_path

    output_dir = output_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)
    for i, image in enumerate(images):
        image.save(output_dir / f"{output_path.stem}_{i:05d}.png")
    return output_dir


def run_preview(session: VisualizerSession, canvas: PygameCanvas):
    """
    Live pygame window.

    Keys: 1-8 select a mode, space toggles play/stop, r resets history,
    Esc quits. The window is resizable.
    """
    import pygame

    pygame.init()
    cfg = session.cfg
    screen = pygame.display.set_mode((cfg.width, cfg.height), pygame.RESIZABLE)
    pygame.display.set_caption("sacredscope")
    font = pygame.font.Font(None, 22)
    clock = pygame.time.Clock()

    session.start(time.perf_counter())
    surface = None
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                session.resize(event.w, event.h)
                surface = None
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    session.toggle(time.perf_counter())
                elif event.key == pygame.K_r:
                    session.reset()
                    session.start(time.perf_counter())
                elif pygame.K_1 <= event.key <= pygame.K_8:
                    session.set_mode(MODE_KEYS[event.key - pygame.K_1])

        now = time.perf_counter()
        session.pump(now)
        if session.running or surface is None:
            surface = canvas.render_frame(
                session.render(now), (cfg.width, cfg.height), previous_surface=surface
            )

        screen.blit(surface, (0, 0))
        screen.blit(font.render(status_line(session), True, (220, 220, 235)), (10, 10))
        pygame.display.flip()
        clock.tick(cfg.fps)

    pygame.quit()


def build_config(args: argparse.Namespace) -> VisualizerConfig:
    """Resolve the config file or the profile plus command-line overrides."""
    overrides = {
        "width": args.width,
        "height": args.height,
        "fps": args.fps,
        "mode": args.mode,
        "intensity": args.intensity,
        "sensitivity": args.sensitivity,
        "transition_speed": args.transition_speed,
        "seed": args.seed,
        "trail_alpha": args.trail,
    }
    if args.config:
        data = load_config(args.config).to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return VisualizerConfig.from_dict(data)
    return VisualizerConfig.from_profile(args.profile, **overrides)


def main():
    parser = argparse.ArgumentParser(
        prog="sacredscope",
        description="Audio-reactive sacred geometry visualizer",
    )

    # Input
    parser.add_argument(
        "-a", "--audio", type=Path, default=None,
        help="Audio file to analyze (default: simulated spectrum)",
    )
    parser.add_argument(
        "-m", "--mode", type=str, default=None,
        choices=[m.value for m in VisualMode],
        help="Visualization mode (default: sacred)",
    )
    parser.add_argument(
        "-i", "--intensity", type=float, default=None,
        help="Input gain 0.1-2.0 (default: 1.0)",
    )
    parser.add_argument(
        "--sensitivity", type=float, default=None,
        help="Additional input gain (default: 1.0)",
    )
    parser.add_argument(
        "--transition-speed", type=float, default=None,
        help="Palette smoothing speed 0.01-1 (default: 0.1)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    # Resolution & Profile
    parser.add_argument(
        "-p", "--profile", type=str, default="medium",
        choices=list(PROFILES),
        help="Target profile (low: 480p 30fps, medium: 720p 60fps, high: 1080p 60fps)",
    )
    parser.add_argument("--width", type=int, default=None, help="Width (overrides profile)")
    parser.add_argument("--height", type=int, default=None, help="Height (overrides profile)")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second (overrides profile)")
    parser.add_argument("-t", "--trail", type=int, default=None, help="Trail persistence 0-100 (default: 0)")
    parser.add_argument(
        "--config", type=Path, default=None,
        help="JSON config file (command-line options override its values)",
    )

    # Headless output
    parser.add_argument("--headless", action="store_true", help="Render to file without a window")
    parser.add_argument(
        "-d", "--duration", type=float, default=5.0,
        help="Seconds to render in headless mode (default: 5)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Headless output: .gif or .png frame sequence (default: sacredscope_<mode>.gif)",
    )
    parser.add_argument(
        "--manifest", type=Path, default=None,
        help="Write recorded analysis ticks to this JSON file (headless only)",
    )

    args = parser.parse_args()

    if args.audio is not None and not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        sys.exit(1)
    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    try:
        cfg = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    source = None
    if args.audio is not None:
        from sacredscope.io.audio_source import AudioFileSource

        print(f"Analyzing audio: {args.audio}")
        t0 = time.time()
        source = AudioFileSource(
            args.audio,
            frame_size=cfg.frame_size,
            analysis_hz=cfg.analysis_hz,
        )
        print(f"  Duration: {source.duration:.1f}s")
        print(f"  Frames: {source.n_frames}")
        print(f"  Analysis took {time.time() - t0:.1f}s")

    session = VisualizerSession(cfg, source=source, record=args.manifest is not None)
    canvas = PygameCanvas(background_color=cfg.background_color, trail_alpha=cfg.trail_alpha)

    if not args.headless:
        run_preview(session, canvas)
        return

    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    output = args.output or Path(f"sacredscope_{cfg.mode.value}.gif")

    print(f"\nRendering {args.duration:.1f}s at {cfg.width}x{cfg.height} @ {cfg.fps}fps")
    print(f"  Profile: {args.profile}, Mode: {cfg.mode.value}")

    t1 = time.time()
    written = render_headless(session, canvas, args.duration, output, progress_callback=_progress_bar)
    print(f"\nDone! Output: {written} ({time.time() - t1:.1f}s)")

    if args.manifest is not None:
        path = SessionExporter().export_json(session.recording, cfg, args.manifest)
        print(f"  Manifest: {path} ({len(session.recording)} ticks)")


if __name__ == "__main__":
    main()
