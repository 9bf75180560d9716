"""SEO toolkit: on-page extraction, keyword and readability analysis, issue scoring."""

__version__ = "0.1.0"

from seotoolkit.parser import extract
from seotoolkit.text_metrics import calculate_readability, extract_keywords
from seotoolkit.keyword_analyzer import analyze_keyword
from seotoolkit.issues import IssueAnalyzer, analyze_issues
from seotoolkit.scoring import calculate_seo_score
from seotoolkit.keyword_gap import find_common, find_missing
from seotoolkit.fetcher import PageFetcher, PageFetchError, fetch_page
from seotoolkit.auditor import KeywordGapError, SEOAuditor
from seotoolkit.research import KeywordResearcher
from seotoolkit.rank_tracker import RankTracker, lookup_rank
from seotoolkit.tracking import TrackingLog
from seotoolkit.models import (
    PageSignals,
    LinkRecord,
    ImageRecord,
    ReadabilityMetrics,
    KeywordAnalysis,
    SEOIssue,
    SEOScore,
    Severity,
    ScoredKeyword,
    MissingKeyword,
    CommonKeyword,
    AuditReport,
    OnPageReport,
    KeywordGapReport,
)
from seotoolkit.config import settings, AnalysisThresholds

__all__ = [
    "extract",
    "calculate_readability",
    "extract_keywords",
    "analyze_keyword",
    "IssueAnalyzer",
    "analyze_issues",
    "calculate_seo_score",
    "find_common",
    "find_missing",
    "PageFetcher",
    "PageFetchError",
    "fetch_page",
    "KeywordGapError",
    "SEOAuditor",
    "KeywordResearcher",
    "RankTracker",
    "lookup_rank",
    "TrackingLog",
    "PageSignals",
    "LinkRecord",
    "ImageRecord",
    "ReadabilityMetrics",
    "KeywordAnalysis",
    "SEOIssue",
    "SEOScore",
    "Severity",
    "ScoredKeyword",
    "MissingKeyword",
    "CommonKeyword",
    "AuditReport",
    "OnPageReport",
    "KeywordGapReport",
    "settings",
    "AnalysisThresholds",
]
