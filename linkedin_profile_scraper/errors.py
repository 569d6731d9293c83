class ScraperError(Exception):
    """Base class for every failure raised by the profile scraper."""


class ConfigurationError(ScraperError):
    """Missing credential or an option of the wrong type.

    Raised before any browser resource is acquired.
    """


class LaunchError(ScraperError):
    """The browser process could not be started."""


class SessionNotOpenError(ScraperError):
    """A run or login check was attempted before `setup()`."""


class SessionBusyError(ScraperError):
    """A second run was started while another run holds the session."""


class SessionExpiredError(ScraperError):
    """The `li_at` session cookie is no longer accepted by LinkedIn.

    Callers need to supply a fresh cookie; the scraper does not retry.
    """


class InvalidURLError(ScraperError):
    """The target URL does not belong to linkedin.com."""


class NavigationError(ScraperError):
    """A page failed to load within the configured timeout."""


class ExtractionError(ScraperError):
    """A rendered page could not be queried or had an unexpected shape."""
