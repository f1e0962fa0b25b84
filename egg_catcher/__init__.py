"""
Egg Catcher Package
===================

Simulation core for an egg-catching arcade game. Four emitters roll eggs
down chutes, a catcher moves along the bottom of the field, and a boss
takes over once the score is high enough. Everything here is
deterministic for a given seed and free of rendering concerns.

All tunable parameters are in game_config.yaml.
"""
