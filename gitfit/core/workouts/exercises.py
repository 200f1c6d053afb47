from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

ExerciseCategory = Literal["Stretch", "Strength", "Eye Care", "Posture"]

CATEGORIES: Tuple[ExerciseCategory, ...] = ("Stretch", "Strength", "Eye Care", "Posture")


@dataclass(frozen=True)
class Exercise:
    name: str
    description: str
    duration_s: int
    category: ExerciseCategory


ALL_EXERCISES: Tuple[Exercise, ...] = (
    Exercise("Chest Opener", "Clasp hands behind back, lift arms, open chest. Hold 15s.", 20, "Stretch"),
    Exercise("Neck Rolls", "Slowly roll your head in a circle. 5 times each direction.", 20, "Stretch"),
    Exercise("Shoulder Shrugs", "Raise shoulders to ears, hold 3s, release. Repeat 5 times.", 20, "Stretch"),
    Exercise("Wrist Circles", "Rotate both wrists slowly, 10 times each direction.", 15, "Stretch"),
    Exercise("Hip Flexor Stretch", "Step one foot forward into a lunge and hold. Switch sides.", 30, "Stretch"),
    Exercise("Chair Squats", "Stand up and sit back down without using your hands. 10 reps.", 30, "Strength"),
    Exercise("Calf Raises", "Rise onto your toes, hold 2s, lower slowly. 15 reps.", 25, "Strength"),
    Exercise("Desk Push-Ups", "Hands on the desk edge, lower your chest, push back. 10 reps.", 25, "Strength"),
    Exercise("Wall Sits", "Back against the wall, knees at 90 degrees. Hold.", 35, "Strength"),
    Exercise("Tricep Dips", "Hands on a stable chair edge, lower and press up. 10 reps.", 30, "Strength"),
    Exercise("20-20-20 Rule", "Look at something 20 feet away for 20 seconds.", 20, "Eye Care"),
    Exercise("Eye Circles", "Roll your eyes slowly clockwise, then counter-clockwise.", 15, "Eye Care"),
    Exercise("Palming", "Rub palms warm and cup them over closed eyes. Breathe.", 25, "Eye Care"),
    Exercise("Focus Shifts", "Alternate focus between your thumb and a distant object.", 20, "Eye Care"),
    Exercise("Blinking Breaks", "Blink quickly 10 times, then close your eyes for 5s.", 15, "Eye Care"),
    Exercise("Wall Angels", "Back to the wall, slide arms up and down like a snow angel.", 30, "Posture"),
    Exercise("Chin Tucks", "Pull your chin straight back, hold 3s. Repeat 8 times.", 25, "Posture"),
    Exercise("Thoracic Extension", "Hands behind head, gently arch your upper back over the chair.", 25, "Posture"),
    Exercise("Shoulder Blade Squeeze", "Squeeze shoulder blades together, hold 5s. Repeat.", 25, "Posture"),
    Exercise("Cat-Cow Stretch", "Seated, alternate arching and rounding your spine.", 30, "Posture"),
)


def random_exercise(
    category: Optional[ExerciseCategory] = None,
    rng: Optional[random.Random] = None,
) -> Exercise:
    """Pick a random exercise, optionally from one category."""
    rng = rng or random.Random()
    pool = [e for e in ALL_EXERCISES if category is None or e.category == category]
    if not pool:
        pool = list(ALL_EXERCISES)
    return rng.choice(pool)
