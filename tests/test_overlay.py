#!/usr/bin/env python3
"""
Tests for the overlay host and the RenderBuffer it composites into.

What matters:
1. Render functions are called once per tick while mounted
2. Lifetime disposal and unmount notify on_dispose exactly once
3. Expired overlays keep drawing for exit_duration_ms
4. Sprites are composited at their position, scaled about their centre
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from PIL import Image

from fly_motion import ManualScheduler, OverlayHost, OverlaySprite, Point, RenderBuffer

RED = (255, 0, 0, 255)


def test_render_fn_called_every_tick_until_lifetime():
    """Overlay draws on each frame until its lifetime runs out."""
    print("\n=== Test: Overlay Lifetime ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler)
    calls, disposals = [], []

    handle = host.mount(lambda now: calls.append(now), lifetime_ms=35)
    handle.on_dispose(lambda: disposals.append(True))

    scheduler.advance(100)
    assert calls == [10, 20, 30]
    assert handle.disposed
    assert disposals == [True]
    assert host.overlays == []
    assert scheduler.subscriber_count == 0, "Idle host must stop listening for ticks"

    print("✓ Lifetime disposal stops rendering and notifies once")


def test_unmount_is_idempotent_and_cancels_lifetime():
    """Explicit unmount wins over the lifetime timer."""
    print("\n=== Test: Overlay Unmount ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler)
    disposals = []

    handle = host.mount(lambda now: None, lifetime_ms=1000)
    handle.on_dispose(lambda: disposals.append(True))
    scheduler.advance(20)

    handle.unmount()
    handle.unmount()
    assert disposals == [True]
    assert scheduler.pending_timers == 0

    print("✓ Unmount runs once and clears the lifetime timer")


def test_concurrent_overlays():
    """Overlapping mounts all draw in mount order."""
    print("\n=== Test: Concurrent Overlays ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler)

    for i in range(3):
        host.mount(lambda now, i=i: OverlaySprite(f"item-{i}", Point(i, i)), lifetime_ms=50 + i * 10)

    scheduler.advance(10)
    assert [s.content for s in host.last_sprites] == ['item-0', 'item-1', 'item-2']

    scheduler.advance(45)
    assert [s.content for s in host.last_sprites] == ['item-1', 'item-2']

    host.unmount_all()
    assert host.overlays == []

    print("✓ Overlays coexist and expire independently")


def test_exit_duration_keeps_drawing():
    """An expired overlay keeps rendering until its exit transition ends."""
    print("\n=== Test: Exit Duration ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler, exit_duration_ms=30)
    calls = []

    handle = host.mount(lambda now: calls.append(now), lifetime_ms=10)
    scheduler.advance(100)

    assert calls == [10, 20, 30]
    assert handle.dismissing and handle.disposed

    print("✓ Exit transition delays removal")


def test_self_unmounting_render_still_draws_its_frame():
    """A render function that unmounts its own overlay still draws that frame."""
    print("\n=== Test: Last Frame On Unmount ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler)

    def render(now):
        if now >= 20:
            handle.unmount()
        return OverlaySprite('coin', Point(now, 0))

    handle = host.mount(render)
    scheduler.advance(40)

    assert [s.position for s in host.last_sprites] == [Point(20, 0)]
    assert handle.disposed and host.overlays == []

    print("✓ Final frame is kept when rendering unmounts the overlay")


def test_compose_scales_about_centre():
    """Half-size sprite is drawn centred on where the full sprite would be."""
    print("\n=== Test: Compose ===")

    scheduler = ManualScheduler()
    host = OverlayHost(scheduler, width=20, height=20)
    square = RenderBuffer.filled(8, 8, RED)

    canvas = host.compose([OverlaySprite(square, Point(4, 4), 1.0)])
    assert canvas.get_pixel(4, 4) == RED
    assert canvas.get_pixel(11, 11) == RED
    assert canvas.get_pixel(12, 12)[3] == 0

    canvas = host.compose([OverlaySprite(square, Point(4, 4), 0.5)])
    assert canvas.get_pixel(4, 4)[3] == 0, "Corner is empty once shrunk"
    assert canvas.get_pixel(8, 8) == RED
    assert canvas.get_pixel(10, 10)[3] == 0

    canvas = host.compose([OverlaySprite(square, Point(4, 4), 0.0)])
    assert not canvas.data.any(), "Zero scale draws nothing"

    print("✓ Sprites shrink in place")


def test_display_callback_receives_frames():
    """With a size and a callback every tick is composited and displayed."""
    print("\n=== Test: Display Callback ===")

    scheduler = ManualScheduler(frame_ms=10)
    host = OverlayHost(scheduler, width=16, height=16)
    frames = []
    host.set_display_callback(frames.append)

    dot = RenderBuffer.filled(2, 2, RED)
    host.mount(lambda now: OverlaySprite(dot, Point(now / 10, 0)), lifetime_ms=25)
    scheduler.advance(30)

    assert len(frames) == 2
    assert frames[0].get_pixel(1, 0) == RED
    assert frames[1].get_pixel(2, 0) == RED

    print("✓ Composited frames reach the display")


def test_render_buffer_image_round_trip(tmp_path):
    """Image files load as flying content with their alpha channel."""
    print("\n=== Test: RenderBuffer From Image ===")

    path = tmp_path / "coin.png"
    img = Image.new('RGBA', (4, 3), (0, 0, 0, 0))
    img.putpixel((1, 2), (10, 200, 30, 255))
    img.save(path)

    buffer = RenderBuffer.from_image(path)
    assert (buffer.width, buffer.height) == (4, 3)
    assert buffer.get_pixel(1, 2) == (10, 200, 30, 255)
    assert buffer.get_pixel(0, 0)[3] == 0

    print("✓ PNG loaded into RenderBuffer")


def test_blit_clips_and_blends():
    """Blit clips at the edges and respects source alpha."""
    print("\n=== Test: Blit ===")

    canvas = RenderBuffer(4, 4)
    canvas.blit(RenderBuffer.filled(3, 3, RED), (-1, 2))
    assert canvas.get_pixel(0, 2) == RED
    assert canvas.get_pixel(1, 3) == RED
    assert canvas.get_pixel(2, 2)[3] == 0

    base = RenderBuffer.filled(1, 1, (0, 0, 255))
    base.blit(RenderBuffer.filled(1, 1, (255, 0, 0, 0)), (0, 0))
    assert base.get_pixel(0, 0) == (0, 0, 255, 255), "Transparent source leaves destination"

    print("✓ Blit clipping and alpha blending work")


if __name__ == '__main__':
    import tempfile
    from pathlib import Path

    test_render_fn_called_every_tick_until_lifetime()
    test_unmount_is_idempotent_and_cancels_lifetime()
    test_concurrent_overlays()
    test_exit_duration_keeps_drawing()
    test_self_unmounting_render_still_draws_its_frame()
    test_compose_scales_about_centre()
    test_display_callback_receives_frames()
    with tempfile.TemporaryDirectory() as tmp:
        test_render_buffer_image_round_trip(Path(tmp))
    test_blit_clips_and_blends()
    print("\nAll overlay tests passed!")
