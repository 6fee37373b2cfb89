"""Entities of the lane-racing simulation.

Entities are plain data: rectangles plus a few typed fields. All behaviour
lives in the systems that move, spawn and resolve them.
"""

from racecore.entities.base import Entity
from racecore.entities.boss import AttackPattern, Boss, BossAttack
from racecore.entities.traffic import Bullet, Obstacle, PowerUp
from racecore.entities.vehicle import Vehicle

__all__ = [
    "AttackPattern",
    "Boss",
    "BossAttack",
    "Bullet",
    "Entity",
    "Obstacle",
    "PowerUp",
    "Vehicle",
]
