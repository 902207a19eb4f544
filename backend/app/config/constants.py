from enum import Enum


class ConnectionStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class PostFilter(str, Enum):
    ALL = "all"
    SAVED = "saved"


class DocumentFilter(str, Enum):
    ALL = "all"
    SHARED_BY_ME = "shared-by-me"
    SHARED_WITH_ME = "shared-with-me"


# extension -> stored file_type label
DOCUMENT_TYPES = {
    ".pdf": "PDF",
    ".xls": "Excel",
    ".xlsx": "Excel",
    ".ppt": "PPT",
    ".pptx": "PPT",
    ".doc": "Word",
    ".docx": "Word",
}
UNKNOWN_DOCUMENT_TYPE = "Unknown"

# file_type label -> (material icon, color) shown by the client
DOCUMENT_ICONS = {
    "PDF": ("description", "primary"),
    "Excel": ("insert_chart", "green-600"),
    "PPT": ("slideshow", "blue-500"),
}
DEFAULT_DOCUMENT_ICON = ("description", "gray-500")

SPECIALTY_COLORS = {
    "Cardiology": "bg-primary/20 text-primary",
    "Neurology": "bg-secondary/20 text-secondary",
    "Infectious Disease": "bg-green-100 text-green-600",
    "Pulmonology": "bg-accent/20 text-accent/80",
}
DEFAULT_SPECIALTY_COLOR = "bg-gray-200 text-gray-600"

MONTH_ABBREVIATIONS = [
    "JAN", "FEB", "MAR", "APR", "MAY", "JUN",
    "JUL", "AUG", "SEP", "OCT", "NOV", "DEC",
]

ALLOWED_PICTURE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}

RECENT_DOCUMENTS_LIMIT = 3
