"""
Fireworks Particle Pool

Arena of reusable particle slots. Each instance keeps its slot index as
a handle; free slots sit on a stack so the most recently released
instance is reused first.
"""
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ParticlePool(Generic[T]):
    """Free-list object pool for one particle kind.

    The factory receives the slot index and must return an instance with
    `slot` and `pooled` attributes and a `reset_effects()` method.
    """

    def __init__(self, factory: Callable[[int], T], capacity: int = 0,
                 on_release: Optional[Callable[[T], None]] = None):
        self._factory = factory
        self.on_release = on_release
        self.slots: List[T] = []
        self.free: List[int] = []
        for _ in range(capacity):
            self.free.append(self._grow())
        # Pop order matches slot order
        self.free.reverse()

    def _grow(self) -> int:
        slot = len(self.slots)
        instance = self._factory(slot)
        instance.pooled = True
        self.slots.append(instance)
        return slot

    def acquire(self) -> T:
        """Take a free instance, allocating a new slot if none is free."""
        slot = self.free.pop() if self.free else self._grow()
        instance = self.slots[slot]
        instance.pooled = False
        return instance

    def release(self, instance: T) -> None:
        """Return an instance to the pool.

        The release hook runs first, while the instance still holds its
        end-of-life state.
        """
        if instance.pooled:
            raise ValueError(f"Slot {instance.slot} released twice")
        if self.on_release:
            self.on_release(instance)
        instance.reset_effects()
        instance.pooled = True
        self.free.append(instance.slot)

    def get(self, handle: int) -> T:
        return self.slots[handle]

    def reset(self) -> None:
        """Mark every slot free without running release hooks."""
        for instance in self.slots:
            instance.reset_effects()
            instance.pooled = True
        self.free = list(range(len(self.slots) - 1, -1, -1))

    @property
    def capacity(self) -> int:
        return len(self.slots)

    @property
    def in_use(self) -> int:
        return len(self.slots) - len(self.free)
