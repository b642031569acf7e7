#!/usr/bin/env python3
"""
Fireworks - Particle Firework Show
==================================

Run with: python -m fireworks.main [--verbose]

Features:
- Pooled stars and sparks with drag, gravity and spin
- Nine shell types plus nested pistils and streamers
- Auto-launch sequencer with barrages and finale mode
- Sky lighting from the live stars
- Click to launch, drag the bottom strip to change speed
"""
import argparse
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from fireworks.core.config import (
    Config, load_config, save_config, FRAME_DURATION, FPS,
    SCREEN_WIDTH, SCREEN_HEIGHT, SHELL_NAMES, SKY_LIGHT_NORMAL,
)
from fireworks.core.log import setup_logging, LoggerHandler
from fireworks.core.simulation import Simulation


def build_config(args: argparse.Namespace) -> Config:
    """Saved settings first, command line flags on top."""
    config = load_config(args.config) if args.config else Config()
    if args.quality is not None:
        config.quality = args.quality
    if args.shell is not None:
        config.shell = args.shell
    if args.size is not None:
        config.size = args.size
    if args.finale:
        config.finale = True
    return config.coerced()


def apply_input(sim: Simulation, input_state: dict) -> None:
    """Map decoded renderer input onto simulation controls."""
    config = sim.ctx.config

    if input_state['pause']:
        sim.toggle_pause()
    if input_state['reload']:
        sim.reload()
        sim.start()
    if input_state['finale']:
        sim.set_config(finale=not config.finale)
    if input_state['auto_launch']:
        sim.set_config(auto_launch=not config.auto_launch)
    if input_state['quality'] is not None:
        sim.set_config(quality=input_state['quality'])
    if input_state['sky_lighting']:
        sim.set_config(sky_lighting=(config.sky_lighting + 1) % (SKY_LIGHT_NORMAL + 1))
    if input_state['resize'] is not None:
        sim.resize(*input_state['resize'])
    if input_state['speed'] is not None:
        sim.set_speed(input_state['speed'])
    if input_state['launch'] is not None and not sim.paused:
        x, y = input_state['launch']
        sim.launch_at(x, y)


def main():
    parser = argparse.ArgumentParser(description="Fireworks - Particle Firework Show")
    parser.add_argument('--verbose', action='store_true',
                        help='Log every launch and burst')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for a reproducible show')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON settings file (loaded on start, saved on exit)')
    parser.add_argument('--quality', type=int, choices=[1, 2, 3], default=None,
                        help='1=low, 2=normal, 3=high')
    parser.add_argument('--shell', type=str, choices=SHELL_NAMES, default=None,
                        help='Shell type to launch')
    parser.add_argument('--size', type=float, default=None,
                        help='Shell size selector, 0..4')
    parser.add_argument('--finale', action='store_true',
                        help='Start in finale mode')
    parser.add_argument('--width', type=int, default=SCREEN_WIDTH)
    parser.add_argument('--height', type=int, default=SCREEN_HEIGHT)
    args = parser.parse_args()

    logger = setup_logging("DEBUG" if args.verbose else "INFO")

    sim = Simulation(build_config(args), width=args.width, height=args.height, seed=args.seed)
    event_logger = LoggerHandler(sim.events, verbose=args.verbose)

    # Create renderer
    try:
        from frontends.pygame_renderer import PygameRenderer
        renderer = PygameRenderer(args.width, args.height)
    except ImportError as e:
        logger.error(f"pygame is required to run the show: {e}")
        logger.error("Install with: pip install pygame")
        sys.exit(1)

    logger.info("Fireworks started!")
    logger.info("Controls: Click=Launch, Bottom strip=Speed, P=Pause, R=Reload, "
                "F=Finale, A=Auto-launch, S=Sky lighting, L=Long exposure, 1-3=Quality, ESC=Quit")

    sim.start()
    running = True

    try:
        while running:
            frame_time = renderer.tick(FPS)
            lag = frame_time / FRAME_DURATION

            input_state = renderer.handle_input()
            if input_state['quit']:
                running = False
                break

            if input_state['resize'] is not None:
                renderer.resize(*input_state['resize'])
            apply_input(sim, input_state)
            sim.update(frame_time, lag)
            renderer.render_frame(sim, lag)

    except KeyboardInterrupt:
        pass
    finally:
        renderer.cleanup()
        event_logger.detach()
        if args.config:
            save_config(sim.ctx.config, args.config)

    logger.info("Show ended.")


if __name__ == '__main__':
    main()
