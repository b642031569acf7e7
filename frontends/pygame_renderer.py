"""
Pygame Renderer
Draws the firework show and decodes user input.

DUCK TYPING EXAMPLE:
The game loop only relies on this interface:
- __init__(width, height)
- render_frame(sim)
- handle_input() -> dict
- cleanup()

No shared base class needed! Any object with these methods can drive the show.
"""
import pygame
from typing import Dict, Any, Tuple

from fireworks.core.colors import COLOR, COLOR_TUPLES, hex_to_rgb


class PygameRenderer:
    """Pygame-based GUI renderer.

    Trails are drawn onto a persistent surface that fades a little each
    frame; the sky color is filled behind it.
    """

    SPEED_BAR_HEIGHT = 6
    SPEED_STRIP_HEIGHT = 44  # Clicks in this strip at the bottom set the speed
    SPEED_EDGE = 16  # Padding so 0 and 1 are easy to hit
    COLOR_SPEED_BAR = hex_to_rgb(COLOR["Blue"])
    COLOR_TEXT = (90, 100, 120)

    # Radial gradient stops for burst flashes (position, rgba)
    FLASH_STOPS = (
        (0.024, (255, 255, 255, 255)),
        (0.125, (255, 160, 20, 51)),
        (0.32, (255, 140, 20, 28)),
        (1.0, (255, 120, 20, 0)),
    )

    def __init__(self, width: int = 1280, height: int = 720):
        pygame.init()
        pygame.display.set_caption("Fireworks")

        self.width = width
        self.height = height

        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 24)

        self._trails = pygame.Surface((width, height))
        self._trails.fill((0, 0, 0))
        self._fade = pygame.Surface((width, height))
        self._fade.fill((0, 0, 0))

        self.long_exposure = False
        self.speed_bar_opacity = 0.0
        self.updating_speed = False

    def render_frame(self, sim: Any, lag: float = 1.0) -> None:
        """Render one frame of the show.

        Args:
            sim: The Simulation to draw
            lag: Frame time relative to a 60 FPS frame
        """
        speed = sim.ctx.sim_speed * lag
        settings = sim.ctx.settings

        # Fade old trails toward black
        fade_alpha = 0.0025 if self.long_exposure else 0.1 * speed
        self._fade.set_alpha(max(1, int(255 * fade_alpha)) if fade_alpha > 0 else 0)
        self._trails.blit(self._fade, (0, 0))

        for x, y, radius in sim.drain_burst_flashes():
            self._draw_burst_flash(x, y, radius)

        star_width = max(1, round(settings.star_draw_width))
        for color, stars in sim.particles.visible_stars():
            rgb = COLOR_TUPLES[color]
            for star in stars:
                pygame.draw.line(self._trails, rgb, (star.x, star.y), (star.prev_x, star.prev_y), star_width)

        for color, sparks in sim.particles.visible_sparks():
            rgb = COLOR_TUPLES[color]
            for spark in sparks:
                pygame.draw.line(self._trails, rgb, (spark.x, spark.y), (spark.prev_x, spark.prev_y), 1)

        # Sky behind the trails: additive blit keeps trails on top
        self.screen.fill(sim.sky_color)
        self.screen.blit(self._trails, (0, 0), special_flags=pygame.BLEND_ADD)

        # Bright heads on the main layer
        for _, stars in sim.particles.visible_stars():
            for star in stars:
                pygame.draw.line(
                    self.screen, (255, 255, 255),
                    (star.x, star.y),
                    (star.x - star.speed_x * 1.6, star.y - star.speed_y * 1.6),
                )

        self._draw_speed_bar(sim.ctx.sim_speed, lag)

        if sim.paused:
            text = self.font.render("PAUSED", True, self.COLOR_TEXT)
            self.screen.blit(text, text.get_rect(center=(self.width // 2, 20)))

        pygame.display.flip()

    def _draw_burst_flash(self, x: float, y: float, radius: float) -> None:
        """Approximate a radial gradient with concentric circles."""
        r = int(radius)
        if r < 1:
            return
        surface = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
        # Paint outermost first so inner stops end up on top
        for i in range(len(self.FLASH_STOPS) - 1, -1, -1):
            stop, rgba = self.FLASH_STOPS[i]
            stop_radius = max(1, int(r * stop))
            pygame.draw.circle(surface, rgba, (r, r), stop_radius)
        self._trails.blit(surface, (int(x) - r, int(y) - r), special_flags=pygame.BLEND_ADD)

    def _draw_speed_bar(self, sim_speed: float, lag: float) -> None:
        if not self.updating_speed:
            # Fade out over half a second
            self.speed_bar_opacity = max(0.0, self.speed_bar_opacity - lag / 30)
        if not self.speed_bar_opacity:
            return
        bar = pygame.Surface((max(1, int(self.width * sim_speed)), self.SPEED_BAR_HEIGHT))
        bar.fill(self.COLOR_SPEED_BAR)
        bar.set_alpha(int(255 * self.speed_bar_opacity))
        self.screen.blit(bar, (0, self.height - self.SPEED_BAR_HEIGHT))

    def speed_from_x(self, x: float) -> float:
        """Map a pointer x position to a simulation speed in 0..1."""
        track = max(1, self.width - self.SPEED_EDGE * 2)
        new_speed = (x - self.SPEED_EDGE) / track
        return min(max(new_speed, 0.0), 1.0)

    def _in_speed_strip(self, pos: Tuple[int, int]) -> bool:
        return pos[1] >= self.height - self.SPEED_STRIP_HEIGHT

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self._trails = pygame.Surface((width, height))
        self._trails.fill((0, 0, 0))
        self._fade = pygame.Surface((width, height))
        self._fade.fill((0, 0, 0))

    def handle_input(self) -> Dict[str, Any]:
        """Process pygame events and return input state.

        Returns:
            Dict with keys: quit, launch, speed, pause, reload, finale,
            auto_launch, quality, sky_lighting, long_exposure, resize
        """
        result = {
            'quit': False,
            'launch': None,        # (x, y) in stage pixels
            'speed': None,         # New simulation speed, 0..1
            'pause': False,
            'reload': False,
            'finale': False,       # Toggle
            'auto_launch': False,  # Toggle
            'quality': None,       # 1, 2 or 3
            'sky_lighting': False,  # Cycle
            'long_exposure': False,
            'resize': None,        # (width, height) of a resized window
        }

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                result['quit'] = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    result['quit'] = True
                elif event.key in (pygame.K_p, pygame.K_SPACE):
                    result['pause'] = True
                elif event.key == pygame.K_r:
                    result['reload'] = True
                elif event.key == pygame.K_f:
                    result['finale'] = True
                elif event.key == pygame.K_a:
                    result['auto_launch'] = True
                elif event.key == pygame.K_s:
                    result['sky_lighting'] = True
                elif event.key == pygame.K_l:
                    self.long_exposure = not self.long_exposure
                    result['long_exposure'] = True
                elif event.key in (pygame.K_1, pygame.K_2, pygame.K_3):
                    result['quality'] = event.key - pygame.K_0
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._in_speed_strip(event.pos):
                    self.updating_speed = True
                    self.speed_bar_opacity = 1.0
                    result['speed'] = self.speed_from_x(event.pos[0])
                else:
                    result['launch'] = event.pos
            elif event.type == pygame.MOUSEMOTION and self.updating_speed:
                self.speed_bar_opacity = 1.0
                result['speed'] = self.speed_from_x(event.pos[0])
            elif event.type == pygame.VIDEORESIZE:
                result['resize'] = event.size
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.updating_speed = False

        return result

    def tick(self, fps: int = 60) -> float:
        """Wait for the next frame and return elapsed milliseconds."""
        return float(self.clock.tick(fps))

    def cleanup(self) -> None:
        """Clean up pygame resources"""
        pygame.quit()
