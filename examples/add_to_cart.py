"""Demo: coins fly from a shop tile into a cart, drawn in the terminal."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fly_motion import (AsyncioScheduler, ElementRegistry, FlyMotion,
                        OverlayHost, RenderBuffer)
from fly_motion.launcher import OVERLAY_EXIT_DURATION_MS

WIDTH, HEIGHT = 64, 32


def render_to_terminal(buffer: RenderBuffer):
    """Draw buffer with ANSI true colors, two pixels per character cell."""
    lines = ['\x1b[H']
    for y in range(0, buffer.height, 2):
        line = ''
        for x in range(buffer.width):
            top = buffer.get_pixel(x, y)
            bottom = buffer.get_pixel(x, y + 1)
            fg = top[:3] if top[3] else (0, 0, 0)
            bg = bottom[:3] if bottom[3] else (0, 0, 0)
            line += f'\x1b[38;2;{fg[0]};{fg[1]};{fg[2]}m\x1b[48;2;{bg[0]};{bg[1]};{bg[2]}m▀'
        lines.append(line + '\x1b[0m')
    sys.stdout.write('\n'.join(lines))
    sys.stdout.flush()


def coin(index: int) -> RenderBuffer:
    """Small square coin, tinted by index."""
    shade = 255 - (index * 20) % 120
    return RenderBuffer.filled(3, 3, (shade, shade - 40, 0))


async def main(args):
    scheduler = AsyncioScheduler(fps=args.fps)
    overlay = OverlayHost(scheduler, WIDTH, HEIGHT, exit_duration_ms=OVERLAY_EXIT_DURATION_MS)
    overlay.set_display_callback(render_to_terminal)

    registry = ElementRegistry()
    registry.mount('shop', (4, 24), size=(3, 3))
    registry.mount('cart', (56, 3), size=(3, 3))

    fly = FlyMotion(scheduler, overlay, positions=registry)

    sys.stdout.write('\x1b[2J\x1b[?25l')
    try:
        await fly.launch_from_elements(
            'shop',
            'cart',
            coin,
            duration_ms=args.duration,
            repeat_count=args.count,
            items_delay_ms=args.delay,
            control_range=args.range,
            delay_before_move_ms=args.hold,
        )
        await scheduler.wait_idle()
    finally:
        sys.stdout.write('\x1b[?25h\n')


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--count', type=int, default=10, help='Number of coins')
    parser.add_argument('--duration', type=int, default=900, help='Base flight duration (ms)')
    parser.add_argument('--delay', type=int, default=100, help='Extra duration per coin (ms)')
    parser.add_argument('--range', type=float, default=12, help='Control point range (px)')
    parser.add_argument('--hold', type=int, default=None, help='Hold on the control point (ms)')
    parser.add_argument('--fps', type=int, default=30)
    args = parser.parse_args()

    logging.basicConfig(
        filename="/tmp/fly_motion_demo.log",
        level=logging.DEBUG,
        format="%(asctime)s.%(msecs)03d - %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    asyncio.run(main(args))
