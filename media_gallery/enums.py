# media_gallery/enums.py
"""
Enum definitions for the media gallery backend.

Centralized location for all string enums shared by models, services and
routers so values never drift between layers.
"""

from enum import Enum


# =============================================================================
# MEDIA
# =============================================================================


class MediaType(str, Enum):
    """Kind of a stored media item."""

    IMAGE = "image"
    VIDEO = "video"

    @property
    def collection(self) -> str:
        """Document collection holding items of this kind."""
        return "images" if self is MediaType.IMAGE else "videos"


class DateSource(str, Enum):
    """Where the upload form's current date came from."""

    NONE = "none"
    MANUAL = "manual"
    EVENT = "event"
    METADATA = "metadata"


class GateState(str, Enum):
    """Result of activating a delete control behind the confirmation gate."""

    ARMED = "armed"
    EXECUTED = "executed"
    BUSY = "busy"


# =============================================================================
# NOTIFICATIONS
# =============================================================================


class NotificationSeverity(str, Enum):
    """Severity of a user-visible notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# =============================================================================
# STORAGE BACKENDS
# =============================================================================


class DocumentStoreBackend(str, Enum):
    MEMORY = "memory"
    POSTGRES = "postgres"


class ObjectStoreBackend(str, Enum):
    MEMORY = "memory"
    FILESYSTEM = "filesystem"


# =============================================================================
# LOGGING
# =============================================================================


class LogLevel(str, Enum):
    """Log level constants for centralized logging system."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogSource(str, Enum):
    """Log source constants for identifying log origins."""

    API = "api"
    SYSTEM = "system"
    STORE = "store"
    PIPELINE = "pipeline"


class LogEmoji(str, Enum):
    """Type-safe emoji constants for log messages."""

    SUCCESS = "✅"
    FAILED = "❌"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    DEBUG = "🐞"
    UPLOAD = "📤"
    DELETE = "🗑️"
    EVENT = "📅"
    IMAGE = "🖼️"
    VIDEO = "🎬"
    CACHE = "💾"
    SEARCH = "🔍"
    LOCK = "🔒"
    STARTUP = "🚀"
    SHUTDOWN = "🛑"


class LoggerName(str, Enum):
    """Logger name constants for categorizing log entries."""

    # API/Request loggers
    REQUEST_LOGGER = "request_logger"
    ROUTER = "router"

    # Pipeline loggers
    UPLOAD_PIPELINE = "upload_pipeline"
    DELETION_PIPELINE = "deletion_pipeline"
    THUMBNAIL_PIPELINE = "thumbnail_pipeline"

    # Service loggers
    IDENTIFIER_RESOLVER = "identifier_resolver"
    DATE_INFERENCE = "date_inference"
    EVENT_RECONCILER = "event_reconciler"
    READ_MODEL = "read_model"
    NOTIFICATIONS = "notifications"
    METADATA_EDIT = "metadata_edit"
    CONFIRMATION_GATE = "confirmation_gate"

    # Storage loggers
    DOCUMENT_STORE = "document_store"
    OBJECT_STORE = "object_store"
    DATABASE = "database"

    # System loggers
    SYSTEM = "system"
    TEST = "test"
