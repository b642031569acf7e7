"""
Fireworks
Particle firework show with a pure Python simulation core.

Features:
- Pooled particles bucketed by color
- Shell launch and burst with nested pistils and streamers
- Crossette, floral, falling leaves and crackle star effects
- Auto-launch sequencer with barrages and finale mode
- Sky lighting eased toward the live star colors
"""
