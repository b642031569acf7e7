"""
Fireworks Sequencer

Picks what to launch next while auto-launch is on:
- Opening shot on the very first call
- Finale mode: rapid single shells, then a long pause
- Weighted choice of single shell, pair, triple volley or barrage
"""
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Tuple

from .effects import PI_HALF
from .events import SequenceEvent
from .shells import make_shell, random_fast_shell

if TYPE_CHECKING:
    from .simulation import Simulation

logger = logging.getLogger("fireworks")


@dataclass
class ShellPlacement:
    """Size and normalized launch coordinates for a randomly placed shell."""
    size: float
    x: float
    height: float


def fit_shell_position_h(position: float) -> float:
    """Keep shells off the side edges of the stage."""
    edge = 0.18
    return (1 - edge * 2) * position + edge


def fit_shell_position_v(position: float) -> float:
    return position * 0.75


class Sequencer:
    """Auto-launch countdown and the launch sequences it triggers."""

    FINALE_COUNT = 32
    FINALE_INTERVAL = 170
    FINALE_COOLDOWN = 6000
    OPENING_DELAY = 2400
    BARRAGE_COOLDOWN = 15000
    # Minimum gap after falling leaves so the sky can clear
    FALLING_LEAVES_DELAY = 4600

    def __init__(self, sim: "Simulation"):
        self.sim = sim
        self.is_first = True
        self.current_finale_count = 0
        self.barrage_last_called = sim.ctx.clock
        self.countdown = 0.0

    def reset(self) -> None:
        """Re-arm the opening shot and forget finale and barrage state."""
        self.is_first = True
        self.current_finale_count = 0
        self.barrage_last_called = self.sim.ctx.clock
        self.countdown = 0.0

    def update(self, time_step: float) -> None:
        """Count down and start the next sequence when due."""
        if not self.sim.ctx.config.auto_launch:
            return
        self.countdown -= time_step
        if self.countdown <= 0:
            self.countdown = self.next_event() * 1.25

    # === Placement ===

    def random_shell_size(self) -> ShellPlacement:
        """Vary size downward; smaller shells burst lower and off center."""
        rng = self.sim.ctx.rng
        base_size = self.sim.ctx.config.size
        max_variance = min(2.5, base_size)
        variance = rng.random() * max_variance
        size = base_size - variance
        height = rng.random() if max_variance == 0 else 1 - variance / max_variance
        center_offset = rng.random() * (1 - height * 0.65) * 0.5
        x = 0.5 - center_offset if rng.random() < 0.5 else 0.5 + center_offset
        return ShellPlacement(
            size=size,
            x=fit_shell_position_h(x),
            height=fit_shell_position_v(height),
        )

    def random_position(self) -> Tuple[float, float]:
        """(x, height) for a launch with no requested position."""
        rng = self.sim.ctx.rng
        return fit_shell_position_h(rng.random()), fit_shell_position_v(rng.random())

    # === Sequences ===

    def next_event(self) -> float:
        """Launch the next sequence and return ms until the one after."""
        if self.is_first:
            self.is_first = False
            shell = make_shell(self.sim, "Crysanthemum", self.sim.ctx.config.size)
            shell.launch(0.5, 0.5)
            return self._announce("opening", self.OPENING_DELAY)

        if self.sim.ctx.config.finale:
            self.seq_random_shell()
            if self.current_finale_count < self.FINALE_COUNT:
                self.current_finale_count += 1
                return self._announce("finale", self.FINALE_INTERVAL)
            self.current_finale_count = 0
            return self._announce("finale", self.FINALE_COOLDOWN)

        rand = self.sim.ctx.rng.random()

        if rand < 0.2 and self.sim.ctx.clock - self.barrage_last_called > self.BARRAGE_COOLDOWN:
            return self._announce("barrage", self.seq_small_barrage())
        if rand < 0.6:
            return self._announce("random", self.seq_random_shell())
        if rand < 0.8:
            return self._announce("two", self.seq_two_random())
        return self._announce("triple", self.seq_triple())

    def _announce(self, name: str, delay: float) -> float:
        logger.debug(f"Sequence {name}, next in {delay:.0f}ms")
        self.sim.events.publish(SequenceEvent(name=name, delay=delay))
        return delay

    def seq_random_shell(self) -> float:
        placement = self.random_shell_size()
        shell = make_shell(self.sim, self.sim.ctx.config.shell, placement.size)
        shell.launch(placement.x, placement.height)

        extra_delay = shell.star_life
        if shell.falling_leaves:
            extra_delay = self.FALLING_LEAVES_DELAY

        return 900 + self.sim.ctx.rng.random() * 600 + extra_delay

    def seq_two_random(self) -> float:
        rng = self.sim.ctx.rng
        name = self.sim.ctx.config.shell
        placement1 = self.random_shell_size()
        placement2 = self.random_shell_size()
        shell1 = make_shell(self.sim, name, placement1.size)
        shell2 = make_shell(self.sim, name, placement2.size)
        left_offset = rng.random() * 0.2 - 0.1
        right_offset = rng.random() * 0.2 - 0.1
        shell1.launch(0.3 + left_offset, placement1.height)
        shell2.launch(0.7 + right_offset, placement2.height)

        extra_delay = max(shell1.star_life, shell2.star_life)
        if shell1.falling_leaves or shell2.falling_leaves:
            extra_delay = self.FALLING_LEAVES_DELAY

        return 900 + rng.random() * 600 + extra_delay

    def seq_triple(self) -> float:
        """One centered shell now, two smaller ones after a short delay."""
        sim = self.sim
        rng = sim.ctx.rng
        shell_name = random_fast_shell(sim.ctx)
        base_size = sim.ctx.config.size
        small_size = max(0, base_size - 1.25)

        offset = rng.random() * 0.08 - 0.04
        make_shell(sim, shell_name, base_size).launch(0.5 + offset, 0.7)

        left_delay = 1000 + rng.random() * 400
        right_delay = 1000 + rng.random() * 400

        def launch_side(center: float) -> Callable[[], None]:
            def action() -> None:
                side_offset = rng.random() * 0.08 - 0.04
                make_shell(sim, shell_name, small_size).launch(center + side_offset, 0.1)
            return action

        sim.timers.schedule(left_delay, "triple-left", launch_side(0.2))
        sim.timers.schedule(right_delay, "triple-right", launch_side(0.8))

        return 4000

    def seq_small_barrage(self) -> float:
        """Mirrored pairs of shells fanning out from the center every 200ms."""
        sim = self.sim
        ctx = sim.ctx
        rng = ctx.rng
        self.barrage_last_called = ctx.clock
        barrage_count = 11 if ctx.is_desktop else 5
        special_index = 3 if ctx.is_desktop else 1
        shell_size = max(0, ctx.config.size - 2)
        main_name = "Crysanthemum" if rng.random() < 0.78 else "Ring"
        special_name = random_fast_shell(ctx)

        def launch(x: float, use_special: bool) -> None:
            if ctx.config.shell == "Random":
                name = special_name if use_special else main_name
            else:
                name = ctx.config.shell
            shell = make_shell(sim, name, shell_size)
            # Wave bounded by 0 and 1 for varying launch heights
            height = (math.cos(x * 5 * math.pi + PI_HALF) + 1) / 2
            shell.launch(x, height * 0.75)

        def launch_pair(offset: float, use_special: bool) -> Callable[[], None]:
            def action() -> None:
                launch(0.5 + offset, use_special)
                launch(0.5 - offset, use_special)
            return action

        count = 0
        delay = 0
        while count < barrage_count:
            if count == 0:
                launch(0.5, False)
                count += 1
            else:
                offset = (count + 1) / barrage_count / 2
                sim.timers.schedule(delay, "barrage", launch_pair(offset, count == special_index))
                count += 2
            delay += 200

        return 3400 + barrage_count * 120
