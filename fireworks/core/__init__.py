"""Fireworks Core - Simulation Logic"""
from .config import Config, QualitySettings, quality_settings, load_config, save_config
from .colors import COLOR, INVISIBLE, ColorPicker
from .events import (
    EventBus,
    ShellLaunchedEvent,
    ShellBurstEvent,
    SequenceEvent,
    ConfigChangedEvent,
    ReloadEvent,
)
from .pool import ParticlePool
from .particles import Star, Spark, BurstFlash, ParticleSystem
from .effects import Effect, EffectDispatcher, create_particle_arc
from .shells import Shell, SHELL_TYPES, make_shell, shell_options
from .timers import DelayedEventQueue, TimedEvent
from .sequencer import Sequencer
from .sky import SkyColorAccumulator
from .simulation import Simulation, SimulationContext
