# closed label sets shared by mood entries, worksheets and the client drafts
# stored values are the enum values, parsing is forgiving about case

from enum import Enum
from typing import Optional


class CognitiveDistortion(str, Enum):
    ALL_OR_NOTHING = "All or nothing thinking"
    ARBITRARY_INFERENCE = "Arbitrary inference"
    CATASTROPHIZING = "Catastrophizing"
    EMOTIONAL_REASONING = "Emotional reasoning"
    EXTERNALIZING = "Externalizing"
    FORTUNE_TELLING = "Fortune telling"
    MENTAL_FILTER = "Mental filter"
    PERSONALIZING = "Personalizing"
    SELF_BLAME = "Self-blame"
    MIND_READING = "Mind reading"
    SHOULD_STATEMENTS = "Should statements"
    THOUGHT_ACTION_FUSION = "Thought-action fusion"
    LABELING = "Labeling"
    PERMISSIVE_THINKING = "Permissive thinking"
    HINDSIGHT_BIAS = "Hindsight bias"
    DISQUALIFYING_THE_POSITIVE = "Disqualifying the positive"
    JUMPING_TO_CONCLUSIONS = "Jumping to conclusions"
    MAGNIFICATION_AND_MINIMIZATION = "Magnification and minimization"
    OVERGENERALIZATION = "Overgeneralization"
    SOCIAL_COMPARISON = "Social comparison"


# labels used by the older worksheet form, folded onto the canonical set
_DISTORTION_ALIASES = {
    "all-or-nothing thinking": CognitiveDistortion.ALL_OR_NOTHING,
    "magnification or minimization": CognitiveDistortion.MAGNIFICATION_AND_MINIMIZATION,
    "personalization": CognitiveDistortion.PERSONALIZING,
}


def parse_distortion(value) -> Optional[CognitiveDistortion]:
    """map a raw label onto CognitiveDistortion. empty means absent.
    raises ValueError for labels outside the set."""
    if value is None or isinstance(value, CognitiveDistortion):
        return value
    text = str(value).strip()
    if not text:
        return None
    key = text.lower()
    for distortion in CognitiveDistortion:
        if distortion.value.lower() == key:
            return distortion
    if key in _DISTORTION_ALIASES:
        return _DISTORTION_ALIASES[key]
    raise ValueError(f"Unknown cognitive distortion: {text}")


class LifeDomain(str, Enum):
    WORK_SCHOOL = "Work/School"
    FAMILY = "Family"
    SOCIAL = "Social"
    SELF_CARE = "Self-Care"
    EXERCISE = "Exercise"
    HOBBIES = "Hobbies"
    REST = "Rest"
    OTHER = "Other"


class ValueCategory(str, Enum):
    FAMILY = "Family"
    RELATIONSHIPS = "Relationships"
    WORK_CAREER = "Work/Career"
    EDUCATION = "Education"
    HEALTH = "Health"
    SPIRITUALITY = "Spirituality"
    COMMUNITY = "Community"
    RECREATION = "Recreation"


VALUE_CATEGORY_DESCRIPTIONS = {
    ValueCategory.FAMILY: "Relationships with parents, siblings, children",
    ValueCategory.RELATIONSHIPS: "Friendships, romantic partnerships",
    ValueCategory.WORK_CAREER: "Professional goals and growth",
    ValueCategory.EDUCATION: "Learning and personal development",
    ValueCategory.HEALTH: "Physical and mental wellbeing",
    ValueCategory.SPIRITUALITY: "Faith, meaning, purpose",
    ValueCategory.COMMUNITY: "Giving back, volunteering",
    ValueCategory.RECREATION: "Fun, hobbies, leisure",
}
