"""GitLab integration constants."""

GITLAB_BASE_URL = "https://gitlab.com/"
GITLAB_API_BASE_URL = "https://gitlab.com/api/v4/projects"

# Seconds before the first poll, then between polls
GITLAB_INITIAL_POLL_DELAY = 8.0
GITLAB_POLL_INTERVAL = 5 * 60.0

# More iids than this in one request makes gitlab.com answer 502 Bad Gateway
GITLAB_MAX_IIDS_PER_REQUEST = 59

GITLAB_PAGE_SIZE = 100
