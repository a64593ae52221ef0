"""
Application Constants

Centralized location for all application constants, organized by domain.
This makes it easy to maintain and update values across the entire application.
"""

from enum import Enum

# =============================================================================
# API Configuration
# =============================================================================

class APIConfig:
    """API-level configuration constants"""

    # API Versioning
    API_V1_PREFIX = "/api/v1"
    API_VERSION = "1.0.0"
    API_TITLE = "Regional Polls API"
    API_DESCRIPTION = """
    A regional polling API: pick a country, province or city and vote on the polls published there.

    ## Features
    - User registration and token authentication
    - Region hierarchy browsing (country / province / city)
    - Region-scoped polls with live percentages
    - One ballot per user and poll
    - Comments and likes
    """

    # CORS Configuration
    ALLOWED_ORIGINS = [
        "http://localhost:3000",  # React dev server
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]


# =============================================================================
# Authentication & Security
# =============================================================================

class AuthConfig:
    """Authentication and security constants"""

    # JWT Configuration
    ACCESS_TOKEN_EXPIRE_MINUTES = 30
    ALGORITHM = "HS256"
    TOKEN_TYPE = "bearer"
    TOKEN_URL = "/api/v1/auth/token"

    # Password requirements
    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_LENGTH = 128


# =============================================================================
# Region Hierarchy
# =============================================================================

class RegionLevel(str, Enum):
    """The three fixed levels of the region tree"""
    COUNTRY = "country"
    PROVINCE = "province"
    CITY = "city"


# Level a region's parent must have (None means "no parent allowed")
REGION_PARENT_LEVEL = {
    RegionLevel.COUNTRY: None,
    RegionLevel.PROVINCE: RegionLevel.COUNTRY,
    RegionLevel.CITY: RegionLevel.PROVINCE,
}


class PollSort(str, Enum):
    """Orderings accepted by the poll listing"""
    PARTICIPANTS = "participants"
    NEWEST = "newest"
    OLDEST = "oldest"


# =============================================================================
# Business Logic Limits
# =============================================================================

class BusinessLimits:
    """Business rules and validation constants"""

    # Poll limits
    MAX_POLL_QUESTION_LENGTH = 300
    MIN_POLL_OPTIONS = 2
    MAX_POLL_OPTIONS = 10
    MAX_POLL_OPTION_LENGTH = 100

    # Comment limits
    MAX_COMMENT_LENGTH = 1000

    # Region limits
    MAX_REGION_NAME_LENGTH = 100

    # User profile limits
    MIN_USERNAME_LENGTH = 3
    MAX_USERNAME_LENGTH = 50
    MAX_FULL_NAME_LENGTH = 100


# =============================================================================
# Error Messages
# =============================================================================

class ErrorMessages:
    """Standardized error messages"""

    # Authentication errors
    INVALID_CREDENTIALS = "Incorrect email or password"
    INVALID_TOKEN = "Could not validate credentials"

    # Authorization errors
    NOT_AUTHORIZED_UPDATE = "Not authorized to update this poll"
    NOT_AUTHORIZED_DELETE = "Not authorized to delete this poll"
    NOT_AUTHORIZED_DELETE_COMMENT = "Not authorized to delete this comment"

    # Resource errors
    POLL_NOT_FOUND = "Poll not found"
    REGION_NOT_FOUND = "Region not found"
    POLL_OPTION_NOT_FOUND = "Poll option not found"
    OPTION_NOT_IN_POLL = "Option does not belong to this poll"
    COMMENT_NOT_FOUND = "Comment not found"

    # Validation errors
    DUPLICATE_EMAIL = "Email already registered"
    DUPLICATE_USERNAME = "Username already registered"
    QUESTION_REQUIRED = "Question is required"
    QUESTION_TOO_LONG = f"Question cannot exceed {BusinessLimits.MAX_POLL_QUESTION_LENGTH} characters"
    TOO_FEW_OPTIONS = "At least 2 options are required"
    TOO_MANY_OPTIONS = f"Cannot provide more than {BusinessLimits.MAX_POLL_OPTIONS} options"
    OPTION_TOO_LONG = f"Each option must be at most {BusinessLimits.MAX_POLL_OPTION_LENGTH} characters long"
    COMMENT_REQUIRED = "Comment text is required"
    COMMENT_TOO_LONG = f"Comment cannot exceed {BusinessLimits.MAX_COMMENT_LENGTH} characters"
    REGION_REQUIRED = "Region ID is required"
    INVALID_REGION_LEVEL = "Invalid region level"
    INVALID_REGION_PARENT = "Region parent violates the country/province/city hierarchy"

    # Business rule violations
    ALREADY_VOTED = "User has already voted on this poll"

    # System errors
    DATABASE_ERROR = "Database operation failed"
    INTERNAL_ERROR = "An unexpected error occurred"
    VALIDATION_ERROR = "Validation failed"


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """Standardized error codes for API responses"""

    # Authentication & Authorization
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Business Logic
    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    ALREADY_VOTED = "ALREADY_VOTED"

    # System
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Database Configuration
# =============================================================================

class DatabaseConfig:
    """Database-related constants"""

    DEFAULT_DATABASE_URL = "sqlite:///./regional_polls.db"

    # Connection settings
    POOL_SIZE = 5
    MAX_OVERFLOW = 10
    POOL_TIMEOUT = 30
    POOL_RECYCLE = 3600  # 1 hour


# =============================================================================
# Logging Configuration
# =============================================================================

class LoggingConfig:
    """Logging configuration constants"""

    # Log levels
    DEFAULT_LOG_LEVEL = "INFO"
    DATABASE_LOG_LEVEL = "WARNING"

    # Log formats
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

