"""Offline story helpers used by the editor: random picks from fixed lists."""

import random

CONTINUATIONS = (
    "The door creaked open, revealing a dusty chamber filled with ancient artifacts.",
    "Suddenly, the lights flickered and died, plunging the room into absolute darkness.",
    "She hesitated, her hand hovering over the red button. Was this truly the only way?",
    "A cold wind swept through the valley, carrying whispers of a long-forgotten language.",
    "The machine hummed to life, its gears grinding with a rhythmic, metallic pulse.",
)

CHOICES = (
    "Open the mysterious box.",
    "Run away as fast as you can.",
    "Ask the stranger for help.",
    "Hide under the desk.",
    "Draw your weapon and prepare for battle.",
)

TONES = ("Suspenseful", "Melancholic", "Action-packed", "Mysterious", "Whimsical")


def continuation(context: str = "", rng: random.Random | None = None) -> str:
    return (rng or random).choice(CONTINUATIONS)


def choices(context: str = "", rng: random.Random | None = None) -> list[str]:
    """Two or three distinct choices."""
    rng = rng or random
    return rng.sample(CHOICES, rng.randint(2, 3))


def tone(text: str = "", rng: random.Random | None = None) -> str:
    return (rng or random).choice(TONES)
