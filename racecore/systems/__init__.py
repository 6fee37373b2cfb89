"""Simulation systems package.

Each system owns one concern of the tick and follows the BaseSystem
contract. Systems execute phase by phase, in this order:

```
FRAME_START   ProgressSystem       speed curve, distance, score, level
ENTITY_ACT    MovementSystem       steering, scrolling, off-screen cleanup
SPAWN         SpawnSystem          obstacles, basic/shop/heart power-ups
BOSS          BossBattleSystem     milestone entry, phases, attacks, rewards
COLLISION     CollisionSystem      shields, hearts, bullets, pickups
POWER_UPS     PowerUpSystem        guns, lightning, beams, magnets, decay
FRAME_END     RecoverySystem       grace window
              SlotMachineSystem    auto-spin
```

Obstacles spawned in a tick are therefore eligible for collision in the
same tick, and power-ups expire only after collisions have consulted them.
"""

from racecore.systems.base import BaseSystem, SystemResult
from racecore.systems.boss_battle import BossBattleSystem
from racecore.systems.collision import CollisionSystem
from racecore.systems.movement import MovementSystem, ProgressSystem, RecoverySystem
from racecore.systems.powerups import PowerUpSystem
from racecore.systems.slot_machine import SlotMachineSystem
from racecore.systems.spawning import SpawnSystem

__all__ = [
    "BaseSystem",
    "BossBattleSystem",
    "CollisionSystem",
    "MovementSystem",
    "PowerUpSystem",
    "ProgressSystem",
    "RecoverySystem",
    "SlotMachineSystem",
    "SpawnSystem",
    "SystemResult",
]
