"""Enumerations shared by models, schemas and services."""
from enum import Enum


class ExerciseCategory(str, Enum):
    POSTURE = "posture"
    BREATHING_TECHNIQUE = "breathing_technique"
    CLEANSING_TECHNIQUE = "cleansing_technique"
    GENERAL_EXERCISE = "general_exercise"
    RELAXATION = "relaxation"
    COMPOUND_FLOW = "compound_flow"


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class IntensityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BreathingCue(str, Enum):
    INHALE = "inhale"
    EXHALE = "exhale"
    HOLD = "hold"


class BodyRegion(str, Enum):
    SPINE = "spine"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lower_back"
    SHOULDERS = "shoulders"
    CHEST = "chest"
    ARMS = "arms"
    WRISTS = "wrists"
    CORE = "core"
    HIPS = "hips"
    GLUTES = "glutes"
    GROIN = "groin"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    KNEES = "knees"
    CALVES = "calves"
    ANKLES = "ankles"
    FEET = "feet"
    NECK = "neck"
    RESPIRATORY = "respiratory"
    NERVOUS_SYSTEM = "nervous_system"

    @property
    def label(self) -> str:
        return BODY_REGION_LABELS[self]


BODY_REGION_LABELS: dict[BodyRegion, str] = {
    BodyRegion.SPINE: "Spine",
    BodyRegion.UPPER_BACK: "Upper Back",
    BodyRegion.LOWER_BACK: "Lower Back",
    BodyRegion.SHOULDERS: "Shoulders",
    BodyRegion.CHEST: "Chest",
    BodyRegion.ARMS: "Arms",
    BodyRegion.WRISTS: "Wrists",
    BodyRegion.CORE: "Core",
    BodyRegion.HIPS: "Hips",
    BodyRegion.GLUTES: "Glutes",
    BodyRegion.GROIN: "Groin",
    BodyRegion.QUADRICEPS: "Quadriceps",
    BodyRegion.HAMSTRINGS: "Hamstrings",
    BodyRegion.KNEES: "Knees",
    BodyRegion.CALVES: "Calves",
    BodyRegion.ANKLES: "Ankles",
    BodyRegion.FEET: "Feet",
    BodyRegion.NECK: "Neck",
    BodyRegion.RESPIRATORY: "Respiratory System",
    BodyRegion.NERVOUS_SYSTEM: "Nervous System",
}


class SectionType(str, Enum):
    WARM_UP = "warm_up"
    FLOW_SEQUENCE = "flow_sequence"
    MAIN_SEQUENCE = "main_sequence"
    BREATHING = "breathing"
    RELAXATION = "relaxation"

    @property
    def display_order(self) -> int:
        return SECTION_DISPLAY_ORDER[self]


# Fixed position of each section within a session
SECTION_DISPLAY_ORDER: dict[SectionType, int] = {
    SectionType.WARM_UP: 1,
    SectionType.FLOW_SEQUENCE: 2,
    SectionType.MAIN_SEQUENCE: 3,
    SectionType.BREATHING: 4,
    SectionType.RELAXATION: 5,
}


class AllocationStatus(str, Enum):
    SCHEDULED = "scheduled"
    EXECUTED = "executed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not AllocationStatus.SCHEDULED
