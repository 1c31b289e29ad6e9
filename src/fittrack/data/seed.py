"""Preset exercise catalog and first-run seeding."""

import logging

from ..db.repositories import ExerciseRepository
from ..models.exercises import Exercise, MuscleGroup

logger = logging.getLogger(__name__)

CHEST = MuscleGroup.CHEST
BACK = MuscleGroup.BACK
LEGS = MuscleGroup.LEGS
SHOULDERS = MuscleGroup.SHOULDERS
ARMS = MuscleGroup.ARMS
CORE = MuscleGroup.CORE
CARDIO = MuscleGroup.CARDIO
FULL_BODY = MuscleGroup.FULL_BODY

# (name, description, instructions, muscle groups, image slug)
PRESET_EXERCISES: list[tuple[str, str, str, list[MuscleGroup], str]] = [
    # Chest
    (
        "Bench Press",
        "Classic chest building compound exercise",
        "Lie on bench, lower bar to chest, press up explosively. Keep shoulder blades retracted.",
        [CHEST, ARMS],
        "bench-press",
    ),
    (
        "Push-ups",
        "Bodyweight chest and triceps exercise",
        "Keep body straight, lower chest to ground, push back up. Engage core throughout.",
        [CHEST, ARMS, CORE],
        "push-ups",
    ),
    (
        "Dumbbell Flyes",
        "Isolation exercise for chest development",
        "Lie on bench, arms slightly bent, lower dumbbells in arc motion, squeeze chest at top.",
        [CHEST],
        "dumbbell-flyes",
    ),
    (
        "Incline Bench Press",
        "Targets upper chest muscles",
        "Set bench to 30-45 degrees, press bar or dumbbells upward focusing on upper chest.",
        [CHEST, SHOULDERS],
        "incline-bench",
    ),
    # Back
    (
        "Deadlift",
        "King of all exercises, full posterior chain",
        "Hip hinge, grip bar, keep back neutral, drive through heels to stand. Control descent.",
        [BACK, LEGS, CORE],
        "deadlift",
    ),
    (
        "Pull-ups",
        "Bodyweight back and biceps builder",
        "Hang from bar, pull chin over bar, control descent. Engage lats throughout movement.",
        [BACK, ARMS],
        "pull-ups",
    ),
    (
        "Bent Over Row",
        "Compound back thickness exercise",
        "Hip hinge, pull bar/dumbbells to lower chest, squeeze shoulder blades. Keep back neutral.",
        [BACK, ARMS],
        "bent-over-row",
    ),
    (
        "Lat Pulldown",
        "Cable exercise for lat development",
        "Pull bar to upper chest, focus on pulling with elbows. Control the return.",
        [BACK, ARMS],
        "lat-pulldown",
    ),
    # Legs
    (
        "Squat",
        "Fundamental leg strength builder",
        "Bar on upper back, descend with knees tracking over toes, drive through heels to stand.",
        [LEGS, CORE],
        "squat",
    ),
    (
        "Lunges",
        "Unilateral leg exercise for balance and strength",
        "Step forward, lower back knee toward ground, drive through front heel to return.",
        [LEGS, CORE],
        "lunges",
    ),
    (
        "Leg Press",
        "Machine-based quad and glute developer",
        "Feet shoulder-width on platform, lower with control, press through full foot.",
        [LEGS],
        "leg-press",
    ),
    (
        "Romanian Deadlift",
        "Hamstring and glute focused hinge movement",
        "Slight knee bend, push hips back, lower bar along legs. Feel hamstring stretch.",
        [LEGS, BACK],
        "romanian-deadlift",
    ),
    # Shoulders
    (
        "Overhead Press",
        "Primary shoulder mass builder",
        "Press bar or dumbbells overhead, lock out at top. Keep core braced.",
        [SHOULDERS, ARMS],
        "overhead-press",
    ),
    (
        "Lateral Raise",
        "Isolation for side delts",
        "Raise dumbbells to sides until parallel with ground. Control the descent.",
        [SHOULDERS],
        "lateral-raise",
    ),
    (
        "Face Pulls",
        "Rear delt and upper back exercise",
        "Pull rope to face, rotate hands apart at end. Squeeze shoulder blades.",
        [SHOULDERS, BACK],
        "face-pulls",
    ),
    # Arms
    (
        "Barbell Curl",
        "Classic bicep mass builder",
        "Curl bar with supinated grip, keep elbows stable. Control the eccentric.",
        [ARMS],
        "barbell-curl",
    ),
    (
        "Tricep Dips",
        "Compound tricep exercise",
        "Lower body by bending elbows, press back up. Keep torso upright.",
        [ARMS, CHEST],
        "tricep-dips",
    ),
    (
        "Hammer Curls",
        "Bicep and forearm developer",
        "Curl dumbbells with neutral grip. Keep elbows at sides throughout.",
        [ARMS],
        "hammer-curls",
    ),
    (
        "Tricep Pushdown",
        "Cable isolation for triceps",
        "Push cable attachment down, fully extend arms. Keep elbows stable.",
        [ARMS],
        "tricep-pushdown",
    ),
    # Core
    (
        "Plank",
        "Isometric core strength exercise",
        "Hold straight body position on forearms. Engage entire core, don't sag hips.",
        [CORE],
        "plank",
    ),
    (
        "Russian Twists",
        "Oblique and core rotational exercise",
        "Seated position, rotate torso side to side. Can hold weight for added resistance.",
        [CORE],
        "russian-twists",
    ),
    (
        "Hanging Leg Raises",
        "Advanced lower abs exercise",
        "Hang from bar, raise legs to parallel or higher. Control the descent.",
        [CORE, ARMS],
        "hanging-leg-raises",
    ),
    (
        "Cable Crunches",
        "Weighted ab exercise",
        "Kneel below cable, crunch down by flexing abs. Keep hips stationary.",
        [CORE],
        "cable-crunches",
    ),
    # Cardio
    (
        "Running",
        "Classic cardiovascular exercise",
        "Maintain steady pace, focus on breathing rhythm. Land midfoot with each stride.",
        [CARDIO, LEGS],
        "running",
    ),
    (
        "Cycling",
        "Low-impact cardio option",
        "Maintain consistent cadence, adjust resistance as needed. Keep core engaged.",
        [CARDIO, LEGS],
        "cycling",
    ),
    (
        "Jump Rope",
        "High-intensity cardio and coordination",
        "Jump with light feet, rotate rope with wrists. Maintain rhythm.",
        [CARDIO, LEGS],
        "jump-rope",
    ),
    (
        "Burpees",
        "Full body cardio and strength",
        "Drop to plank, push-up, jump feet to hands, explosive jump. Repeat.",
        [CARDIO, FULL_BODY],
        "burpees",
    ),
    # Full body
    (
        "Clean and Press",
        "Olympic lift variation for full body power",
        "Clean bar to shoulders, press overhead. Explosive hip extension on clean.",
        [FULL_BODY, SHOULDERS],
        "clean-press",
    ),
    (
        "Kettlebell Swings",
        "Dynamic hip hinge movement",
        "Hip hinge, swing kettlebell between legs, thrust hips to swing to shoulder height.",
        [FULL_BODY, CARDIO],
        "kettlebell-swings",
    ),
    (
        "Turkish Get-Up",
        "Complex full body stability exercise",
        "From lying to standing while holding weight overhead. Reverse to return.",
        [FULL_BODY, CORE],
        "turkish-getup",
    ),
]


def preset_exercises() -> list[Exercise]:
    """Build the preset catalog with fresh ids."""
    return [
        Exercise(
            name=name,
            description=description,
            instructions=instructions,
            muscle_groups=list(groups),
            placeholder_image_url=f"exercisedb://{slug}",
            is_custom=False,
        )
        for name, description, instructions, groups, slug in PRESET_EXERCISES
    ]


async def seed_exercises(repo: ExerciseRepository) -> int:
    """Insert the preset catalog if the library is empty.

    Only checks that some exercise exists, not that the catalog is
    complete. Returns the number of exercises inserted.
    """
    existing = await repo.count()
    if existing:
        logger.debug("Exercise library has %d entries; skipping seed", existing)
        return 0

    exercises = preset_exercises()
    await repo.insert_many(exercises)
    logger.info("Seeded %d preset exercises", len(exercises))
    return len(exercises)
