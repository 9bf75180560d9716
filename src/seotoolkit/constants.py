# src/seotoolkit/constants.py
"""Centralized constants for the SEO toolkit.

This module contains magic numbers and fixed tables that are used across
multiple modules. For user-configurable thresholds, see config.py and
AnalysisThresholds.
"""

# =============================================================================
# Text Metrics Constants
# =============================================================================

# Vowels used for syllable grouping
SYLLABLE_VOWELS = "aeiouy"

# Words this short always count as a single syllable
SHORT_WORD_MAX_LENGTH = 3

# Readability bands for Flesch Reading Ease, checked top-down
READABILITY_BANDS = [
    (90, "Very Easy (5th grade)"),
    (80, "Easy (6th grade)"),
    (70, "Fairly Easy (7th grade)"),
    (60, "Standard (8th-9th grade)"),
    (50, "Fairly Difficult (10th-12th grade)"),
    (30, "Difficult (College)"),
]
READABILITY_FLOOR_LABEL = "Very Difficult (Graduate)"
READABILITY_NOT_AVAILABLE = "N/A"

# Tokens must be longer than this to count as keywords
MIN_KEYWORD_LENGTH = 2

# Default number of keywords returned by frequency extraction
DEFAULT_TOP_KEYWORDS = 20

# Common English words excluded from keyword extraction
STOP_WORDS = frozenset({
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'by', 'for', 'from', 'has', 'he',
    'in', 'is', 'it', 'its', 'of', 'on', 'that', 'the', 'to', 'was', 'were',
    'will', 'with', 'this', 'but', 'they', 'have', 'had', 'what', 'when',
    'where', 'who', 'which', 'why', 'how', 'all', 'each', 'every', 'both', 'few',
    'more', 'most', 'other', 'some', 'such', 'no', 'nor', 'not', 'only', 'own',
    'same', 'so', 'than', 'too', 'very', 'just', 'can', 'should', 'now', 'also',
    'been', 'being', 'do', 'does', 'did', 'done', 'get', 'got', 'your', 'you',
    'our', 'we', 'us', 'my', 'me', 'i', 'if', 'or', 'any', 'about', 'into',
    'through', 'during', 'before', 'after', 'above', 'below', 'up', 'down',
    'out', 'off', 'over', 'under', 'again', 'further', 'then', 'once', 'here',
    'there', 'these', 'those', 'am', 'would', 'could', 'may', 'might', 'must',
    'shall', 'need', 'let', 'like', 'new', 'one', 'two', 'first', 'last', 'many',
})


# =============================================================================
# Keyword Analysis Constants
# =============================================================================

# Prominence weights per placement (sum to 100)
PROMINENCE_WEIGHTS = {
    'title': 25,
    'meta_description': 20,
    'h1': 25,
    'h2': 15,
    'url': 15,
}

# On-page checker scoring weights (keyword placement + content health)
ON_PAGE_WEIGHTS = {
    'title': 20,
    'meta_description': 15,
    'h1': 20,
    'h2': 10,
    'url': 10,
    'density_ok': 15,
    'density_off': 5,
    'long_content': 10,
    'medium_content': 5,
}

# Content length thresholds used by the on-page checker
ON_PAGE_LONG_CONTENT_WORDS = 800
ON_PAGE_THIN_CONTENT_WORDS = 500

# Number of related keywords suggested by the on-page checker
RELATED_KEYWORD_SUGGESTIONS = 5
RELATED_KEYWORDS_REPORTED = 15


# =============================================================================
# Issue & Score Constants
# =============================================================================

# Issue categories
CATEGORY_META_TAGS = "Meta Tags"
CATEGORY_HEADINGS = "Headings"
CATEGORY_IMAGES = "Images"
CATEGORY_CONTENT = "Content"
CATEGORY_TECHNICAL = "Technical"
CATEGORY_SOCIAL = "Social"
CATEGORY_LINKS = "Links"

# Points deducted per issue severity
SEVERITY_DEDUCTIONS = {
    'error': 15,
    'warning': 8,
    'info': 3,
}

# Social issues only count half against the on-page score
SOCIAL_DEDUCTION_FACTOR = 0.5

# Which sub-score each issue category reduces
CATEGORY_SCORE_MAP = {
    CATEGORY_CONTENT: 'content',
    CATEGORY_TECHNICAL: 'technical',
    CATEGORY_META_TAGS: 'on_page',
    CATEGORY_HEADINGS: 'on_page',
    CATEGORY_IMAGES: 'on_page',
    CATEGORY_LINKS: 'links',
    CATEGORY_SOCIAL: 'on_page',
}

# Weights of each sub-score in the overall score
SCORE_WEIGHTS = {
    'content': 0.30,
    'technical': 0.25,
    'on_page': 0.30,
    'links': 0.15,
}

# Bonus points for good signals
SCORE_BONUS = 5
BONUS_WORD_COUNT = 1000
BONUS_H2_COUNT = 3
BONUS_INTERNAL_LINKS = 10

MAX_SCORE = 100
MIN_SCORE = 0


# =============================================================================
# Keyword Gap Constants
# =============================================================================

# Opportunity tiers by competitor keyword score (strictly greater than)
OPPORTUNITY_HIGH_THRESHOLD = 0.7
OPPORTUNITY_MEDIUM_THRESHOLD = 0.4

# Keywords pulled from a domain's page content and meta/headings
DOMAIN_CONTENT_KEYWORDS = 50
DOMAIN_META_KEYWORDS = 20
DOMAIN_KEYWORD_LIMIT = 50
META_KEYWORD_BOOST = 0.5


# =============================================================================
# Fetcher Constants
# =============================================================================

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; SEOToolkit/1.0)"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30
DEFAULT_FETCH_CONCURRENCY = 3
BATCH_DELAY_SECONDS = 0.5

# Milliseconds of load time per page-speed point lost
PAGE_SPEED_MS_PER_POINT = 50

# Display limits for audit reports
REPORT_SAMPLE_LIMIT = 10
AUDIT_TOP_KEYWORDS = 10


# =============================================================================
# Keyword Research Constants
# =============================================================================

SUGGEST_URL = "https://suggestqueries.google.com/complete/search"
MAX_SUGGESTIONS = 30
SUGGESTION_QUERY_COUNT = 5
LONG_TAIL_MIN_WORDS = 3
TREND_RELATED_QUERIES = 8

QUESTION_TEMPLATES = [
    "What is {keyword}?",
    "How does {keyword} work?",
    "Why is {keyword} important?",
    "How to use {keyword}?",
    "What are the benefits of {keyword}?",
    "Is {keyword} worth it?",
    "How much does {keyword} cost?",
    "What is the best {keyword}?",
    "{keyword} vs alternatives?",
    "How to get started with {keyword}?",
]

QUESTION_PREFIX_PATTERN = r"^(what|how|why|when|where|who|which|can|does|is|are)"

DIFFICULTY_MODIFIERS = [
    'best', 'top', 'cheap', 'free', 'review', 'vs', 'alternative', 'tutorial', 'guide',
]


# =============================================================================
# Rank Tracking Constants
# =============================================================================

GOOGLE_DOMAINS = {
    'IN': 'google.co.in',
    'US': 'google.com',
    'UK': 'google.co.uk',
    'CA': 'google.ca',
    'AU': 'google.com.au',
    'DE': 'google.de',
    'FR': 'google.fr',
    'AE': 'google.ae',
    'SG': 'google.com.sg',
}

SERP_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
]

# Hosts that are never counted as organic results
SERP_EXCLUDED_HOSTS = [
    'google.', 'youtube.com/results', 'webcache',
]

SERP_MAX_RESULTS = 100
SERP_TOP_RESULTS = 10

# Politeness delays (seconds): base + random jitter
SERP_DELAY_BASE = 2.0
SERP_DELAY_JITTER = 3.0
SERP_BATCH_DELAY_BASE = 5.0
SERP_BATCH_DELAY_JITTER = 5.0

# Stored rank checks
RANK_HISTORY_LIMIT = 100
DEFAULT_DEVICE = "desktop"
