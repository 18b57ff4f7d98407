from enum import Enum


class UserRole(Enum):
    ADMIN = "admin"
    USER = "user"


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class AccessLevel(Enum):
    FREE = "free"
    PREMIUM = "premium"


class RequestStatus(Enum):
    """Lesson access request lifecycle: pending -> approved | rejected"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(Enum):
    QUIZ_RESULT = "quiz_result"
    ACHIEVEMENT = "achievement"
    REMINDER = "reminder"
    BROADCAST = "broadcast"
    LESSON_ACCESS = "lesson_access"


class Priority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Subjects seeded on first migrate
DEFAULT_SUBJECTS = [
    {
        "id": "sft",
        "name": "SFT",
        "description": "Science for Technology - Core scientific principles",
        "icon": "🔬",
        "color": "from-green-500 to-emerald-600",
        "image_url": "https://images.pexels.com/photos/2280571/pexels-photo-2280571.jpeg",
    },
    {
        "id": "et",
        "name": "ET",
        "description": "Engineering Technology - Applied engineering concepts",
        "icon": "⚙️",
        "color": "from-orange-500 to-amber-600",
        "image_url": "https://images.pexels.com/photos/159298/gears-cogs-machine-machinery-159298.jpeg",
    },
    {
        "id": "ict",
        "name": "ICT",
        "description": "Information & Communication Technology",
        "icon": "💻",
        "color": "from-blue-500 to-indigo-600",
        "image_url": "https://images.pexels.com/photos/546819/pexels-photo-546819.jpeg",
    },
]

DEFAULT_APP_TEXTS = [
    ("hero_title", "Access Your Complete SFT Quiz Bank", "Main hero section title"),
    ("hero_subtitle", "Comprehensive study materials and practice tests", "Hero section subtitle"),
    ("featured_section_title", "Featured Subjects 👆", "Featured section title"),
]


def choices(enum_cls):
    return [(member.value, member.value) for member in enum_cls]
