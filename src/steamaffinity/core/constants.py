"""Constants and fixed values for SteamAffinity."""

# Steam Constants
class SteamConstants:
    """Constants describing the Steam endpoints and markup."""
    
    # Review feed
    REVIEW_FEED_PATH = "/appreviews/"  # appended with the app id
    INITIAL_CURSOR = "*"  # first cursor of every feed walk
    UNRESTRICTED_DAY_RANGE = "9223372036854775807"  # widest day range the feed accepts
    
    # Profile review history
    PROFILE_PATH = "/profiles/{steam_id}/recommended/"  # numeric steamID64 form
    VANITY_PATH = "/id/{name}/recommended/"  # custom URL form
    PAGE_PARAM = "p"  # query parameter selecting page 2+
    
    # Markup
    THUMBS_UP = "Up"
    THUMBS_DOWN = "Down"


class HeaderConstants:
    """Headers sent with every request."""
    
    BROWSER_HEADERS = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Cache-Control": "max-age=0",
    }


# Logging Constants
class LogConstants:
    """Constants for log formatting and activity narration."""
    
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ACTIVITY_TIME_FORMAT = "%H:%M:%S"  # timestamps shown in the activity log
    PACKAGE_LOGGER = "steamaffinity"
    SUCCESS = {"severity": "success"}  # pass as extra= to mark a success line


# Notification Constants
class NotificationConstants:
    """Titles for terminal-state notifications."""
    
    COMPLETE_TITLE = "Steam Analysis Complete!"
    FAILED_TITLE = "Steam Analysis Failed"
