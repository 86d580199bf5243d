import enum


class PropertyPurpose(str, enum.Enum):
    RENT = "rent"
    SALE = "sale"


class CategoryType(str, enum.Enum):
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class RentFrequency(str, enum.Enum):
    YEARLY = "yearly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"
    DAILY = "daily"


class CompletionStatus(str, enum.Enum):
    READY = "ready"
    OFF_PLAN = "off_plan"


class Urgency(str, enum.Enum):
    THIS_MONTH = "this_month"
    WITHIN_2_MONTHS = "within_2_months"
    FLEXIBLE = "flexible"


class OwnershipType(str, enum.Enum):
    FREEHOLD = "freehold"
    LEASEHOLD = "leasehold"


def enum_values(enum_cls):
    """Persist enum values ("rent") rather than member names ("RENT")"""
    return [member.value for member in enum_cls]
