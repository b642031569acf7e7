"""
Fireworks Frontends
Renderers that draw a Simulation and decode user input.

DUCK TYPING EXAMPLE:
A renderer only needs this interface:
- __init__(width, height)
- render_frame(sim)
- handle_input() -> dict
- cleanup()

No shared base class needed! The main loop works with anything that has it:

    renderer = PygameRenderer(1280, 720)
    while running:
        sim.update(frame_time, lag)
        renderer.render_frame(sim)
"""

# Note: Don't import renderers here to avoid importing pygame
# when it might not be needed. Import directly in main.py instead.
