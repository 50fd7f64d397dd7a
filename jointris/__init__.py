"""
Jointris Package
================

A falling-block puzzle game where every piece is a cluster of four square
rigid bodies held together by joints and simulated with pymunk.

- Core game logic lives in ``jointris.core``
- tunable parameters live in game_config.yaml next to this file
"""
