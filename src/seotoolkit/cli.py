"""Command-line interface for the SEO toolkit."""

import argparse
import json
import logging
import sys
from typing import Optional

from seotoolkit.auditor import KeywordGapError, SEOAuditor
from seotoolkit.config import AnalysisThresholds, settings
from seotoolkit.constants import RANK_HISTORY_LIMIT, REPORT_SAMPLE_LIMIT
from seotoolkit.database import get_db_client
from seotoolkit.fetcher import PageFetchError
from seotoolkit.logging_config import setup_logging
from seotoolkit.rank_tracker import RankTracker
from seotoolkit.research import KeywordResearcher, estimate_volume_from_trend
from seotoolkit.tracking import TrackingLog

logger = logging.getLogger(__name__)


def _rule(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(title)
    print(f"{'=' * 60}")


def print_audit(report) -> None:
    """Print an audit report in a formatted way."""
    summary = report.summary()
    _rule(f"SEO Audit for: {report.url}")
    print(f"\n📊 Overall Score: {report.score.overall}/100")
    print("\nCategory Scores:")
    for category, score in report.score.categories.items():
        print(f"  • {category.replace('_', ' ').title()}: {score}/100")

    print(f"\nTitle ({summary['title_length']} chars): {summary['title'] or '(missing)'}")
    print(f"Meta description ({summary['meta_description_length']} chars)")
    print(f"Words: {summary['word_count']}  |  H1: {summary['h1_count']}  |  H2: {summary['h2_count']}")
    print(f"Links: {summary['internal_links']} internal, {summary['external_links']} external, "
          f"{summary['nofollow_links']} nofollow")
    print(f"Images: {summary['total_images']} ({summary['images_without_alt']} without alt)")
    print(f"Readability: {report.readability.flesch_reading_ease} ({report.readability.readability_level})")
    print(f"SSL: {'yes' if report.ssl_enabled else 'no'}  |  "
          f"Load time: {report.load_time_ms}ms  |  Page speed: {report.page_speed}/100")
    if summary['schema_types']:
        print(f"Schema: {', '.join(summary['schema_types'])}")

    if report.issues:
        print("\n⚠️  Issues:")
        for issue in report.issues:
            print(f"  • [{issue.severity.value}] {issue.category}: {issue.message}")
            print(f"      → {issue.recommendation}")

    if report.top_keywords:
        print("\n🔑 Top Keywords:")
        print("  " + ", ".join(kw.keyword for kw in report.top_keywords))

    print(f"\n{'=' * 60}\n")


def print_on_page(report) -> None:
    """Print an on-page check in a formatted way."""
    analysis = report.analysis
    _rule(f"On-Page Check for '{report.keyword}': {report.url}")
    print(f"\n📊 On-Page Score: {report.seo_score}/100")
    print("\nKeyword placement:")
    for label, present in (
        ('Title', analysis.in_title),
        ('Meta description', analysis.in_meta_description),
        ('H1', analysis.in_h1),
        ('H2', analysis.in_h2),
        ('URL', analysis.in_url),
    ):
        print(f"  {'✅' if present else '❌'} {label}")
    print(f"\nDensity: {analysis.density}% ({analysis.count} mentions, {report.word_count} words)")
    print(f"Prominence: {analysis.prominence_score}/100")
    print(f"Readability: {report.readability.flesch_reading_ease} ({report.readability.readability_level})")

    if report.suggestions:
        print("\n💡 Suggestions:")
        for suggestion in report.suggestions:
            print(f"  • {suggestion}")

    print(f"\n{'=' * 60}\n")


def print_keyword_gap(report) -> None:
    """Print a keyword gap report in a formatted way."""
    summary = report.summary
    _rule(f"Keyword Gap: {report.your_domain} vs {report.competitor_domain}")
    print(f"\nYour keywords: {summary['total_your_keywords']}")
    print(f"Competitor keywords: {summary['total_competitor_keywords']}")
    print(f"Missing: {summary['missing_keywords_count']}  |  Common: {summary['common_keywords_count']}  |  "
          f"Unique to you: {summary['your_unique_count']}")
    print(f"Gap: {summary['gap_percentage']}%")

    if report.missing:
        print("\n🎯 Missing Keywords:")
        for kw in report.missing[:REPORT_SAMPLE_LIMIT]:
            print(f"  • {kw.keyword} ({kw.opportunity})")

    if report.common:
        print("\n🤝 Common Keywords:")
        print("  " + ", ".join(kw.keyword for kw in report.common[:REPORT_SAMPLE_LIMIT]))

    print(f"\n{'=' * 60}\n")


def print_research(result) -> None:
    """Print keyword research in a formatted way."""
    _rule(f"Keyword Research: {result.keyword}")
    print(f"\nDifficulty: {result.difficulty}/100 ({result.competition} competition)")
    print(f"Estimated volume: {result.volume}  |  CPC: {result.estimated_cpc}")
    print(f"Opportunity: {result.opportunity}  |  Trend: {result.trend}")

    if result.related_terms:
        print("\nRelated terms:")
        for term in result.related_terms[:REPORT_SAMPLE_LIMIT]:
            print(f"  • {term}")
    if result.long_tail_keywords:
        print("\nLong-tail keywords:")
        for term in result.long_tail_keywords[:REPORT_SAMPLE_LIMIT]:
            print(f"  • {term}")

    print("\nQuestions:")
    for question in result.questions:
        print(f"  • {question}")

    print(f"\n{'=' * 60}\n")


def print_trends(trends) -> None:
    _rule("Keyword Interest")
    for trend in trends:
        volume = estimate_volume_from_trend(trend.interest, trend.keyword)
        print(f"  • {trend.keyword}: {trend.interest}/100, {trend.trend} (~{volume} searches)")
    print(f"\n{'=' * 60}\n")


def print_rank(result) -> None:
    _rule(f"Rank for '{result.keyword}' ({result.location})")
    if result.position is None:
        print(f"\n{result.target_domain} was not found")
    else:
        print(f"\n🏆 {result.target_domain} ranks #{result.position}: {result.url}")
    if result.top_results:
        print("\nTop results:")
        for serp in result.top_results:
            print(f"  {serp.position}. {serp.url}")
    print(f"\n{'=' * 60}\n")


def print_competitors(pairs) -> None:
    _rule("Tracked Competitors")
    if not pairs:
        print("\nNo competitors tracked yet")
    for pair in pairs:
        print(f"  [{pair.id}] {pair.your_domain} vs {pair.competitor_domain} (added {pair.added_at})")
    print(f"\n{'=' * 60}\n")


def print_competitor_added(pair) -> None:
    print(f"✅ Tracking {pair.competitor_domain} against {pair.your_domain} (id {pair.id})")


def print_rank_history(entries) -> None:
    _rule("Rank History")
    if not entries:
        print("\nNo rank checks stored yet")
    for entry in entries:
        position = f"#{entry.position}" if entry.position is not None else "not found"
        print(f"  [{entry.id}] {entry.tracked_at}  {entry.domain} / '{entry.keyword}': "
              f"{position} ({entry.location}, {entry.device})")
    print(f"\n{'=' * 60}\n")


def print_removed(result) -> None:
    if result['removed']:
        print(f"🗑️  Deleted {result['kind']} {result['id']}")
    else:
        print(f"No {result['kind']} with id {result['id']}")


def _make_auditor(args, store) -> SEOAuditor:
    thresholds = (
        AnalysisThresholds.from_file(args.thresholds)
        if args.thresholds
        else AnalysisThresholds.from_env()
    )
    return SEOAuditor(store=store, thresholds=thresholds)


def audit_command(args, store):
    """Audit a single page."""
    return _make_auditor(args, store).audit(args.url), print_audit


def on_page_command(args, store):
    """Check on-page optimization for a keyword."""
    return _make_auditor(args, store).check_on_page(args.url, args.keyword), print_on_page


def keyword_gap_command(args, store):
    """Compare keywords between two domains."""
    auditor = _make_auditor(args, store)
    return auditor.keyword_gap(args.your_domain, args.competitor_domain), print_keyword_gap


def research_command(args, store):
    """Research a seed keyword."""
    result = KeywordResearcher().research(args.keyword)
    if store is not None:
        TrackingLog(store).record_research(result)
    return result, print_research


def trends_command(args, store):
    """Compare estimated interest across keywords."""
    researcher = KeywordResearcher()
    if len(args.keywords) == 1:
        trends = [researcher.estimate_trend(args.keywords[0])]
    else:
        trends = researcher.compare_keywords(args.keywords)
    return trends, print_trends


def rank_command(args, store):
    """Look up where a domain ranks for a keyword."""
    result = RankTracker().check_rank(args.keyword, args.domain, args.country, args.city)
    if store is not None:
        TrackingLog(store).record_rank(result)
    return result, print_rank


def competitors_add_command(args, store):
    """Start tracking a competitor."""
    return TrackingLog(store).add_competitor(args.your_domain, args.competitor_domain), print_competitor_added


def competitors_list_command(args, store):
    """List tracked competitors."""
    return TrackingLog(store).list_competitors(args.domain), print_competitors


def competitors_remove_command(args, store):
    """Stop tracking a competitor."""
    removed = TrackingLog(store).remove_competitor(args.id)
    return {'kind': 'competitor', 'id': args.id, 'removed': removed}, print_removed


def rank_history_list_command(args, store):
    """Show stored rank checks, newest first."""
    return TrackingLog(store).rank_history(args.domain, args.limit), print_rank_history


def rank_history_delete_command(args, store):
    """Delete a stored rank check."""
    removed = TrackingLog(store).delete_rank(args.id)
    return {'kind': 'rank check', 'id': args.id, 'removed': removed}, print_removed


def _to_data(item):
    if callable(getattr(item, 'summary', None)):
        return item.summary()
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    return item


def _to_json(result) -> str:
    if isinstance(result, list):
        data = [_to_data(item) for item in result]
    else:
        data = _to_data(result)
    return json.dumps(data, indent=2, default=str)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seotoolkit",
        description="SEO Toolkit - Audit pages, check keywords and research search opportunities",
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Persist results to the configured database",
    )
    parser.add_argument(
        "--thresholds",
        help="JSON file with analysis thresholds (defaults to SEO_THRESHOLD_* env vars)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    audit_parser = subparsers.add_parser("audit", help="Run a full SEO audit of a page.")
    audit_parser.add_argument("url", help="Page URL (https:// is assumed)")
    audit_parser.set_defaults(func=audit_command)

    on_page_parser = subparsers.add_parser(
        "on-page", help="Check how well a page is optimized for a keyword."
    )
    on_page_parser.add_argument("url", help="Page URL")
    on_page_parser.add_argument("keyword", help="Target keyword")
    on_page_parser.set_defaults(func=on_page_command)

    gap_parser = subparsers.add_parser(
        "keyword-gap", help="Find keywords a competitor covers that you don't."
    )
    gap_parser.add_argument("your_domain", help="Your domain (e.g., example.com)")
    gap_parser.add_argument("competitor_domain", help="Competitor domain")
    gap_parser.set_defaults(func=keyword_gap_command)

    research_parser = subparsers.add_parser(
        "research", help="Research suggestions, questions and difficulty for a keyword."
    )
    research_parser.add_argument("keyword", help="Seed keyword")
    research_parser.set_defaults(func=research_command)

    trends_parser = subparsers.add_parser(
        "trends", help="Estimate and compare interest across keywords."
    )
    trends_parser.add_argument("keywords", nargs="+", help="Keywords to compare")
    trends_parser.set_defaults(func=trends_command)

    rank_parser = subparsers.add_parser("rank", help="Look up a domain's rank for a keyword.")
    rank_parser.add_argument("keyword", help="Search keyword")
    rank_parser.add_argument("domain", help="Domain to look for")
    rank_parser.add_argument(
        "--country",
        default=settings.DEFAULT_COUNTRY,
        help=f"Country code for localized results (default: {settings.DEFAULT_COUNTRY})",
    )
    rank_parser.add_argument("--city", help="City for local results")
    rank_parser.set_defaults(func=rank_command)

    competitors_parser = subparsers.add_parser(
        "competitors", help="Manage tracked competitors (stored in the database)."
    )
    competitors_actions = competitors_parser.add_subparsers(dest="action", required=True)
    add_parser = competitors_actions.add_parser("add", help="Track a competitor")
    add_parser.add_argument("your_domain", help="Your domain")
    add_parser.add_argument("competitor_domain", help="Competitor domain")
    add_parser.set_defaults(func=competitors_add_command, uses_store=True)
    list_parser = competitors_actions.add_parser("list", help="List tracked competitors")
    list_parser.add_argument("--domain", help="Only competitors of this domain")
    list_parser.set_defaults(func=competitors_list_command, uses_store=True)
    remove_parser = competitors_actions.add_parser("remove", help="Stop tracking a competitor")
    remove_parser.add_argument("id", type=int, help="Competitor id (see 'competitors list')")
    remove_parser.set_defaults(func=competitors_remove_command, uses_store=True)

    history_parser = subparsers.add_parser(
        "rank-history", help="Show or delete stored rank checks."
    )
    history_actions = history_parser.add_subparsers(dest="action", required=True)
    history_list_parser = history_actions.add_parser("list", help="Latest rank checks, newest first")
    history_list_parser.add_argument("--domain", help="Only checks for this domain")
    history_list_parser.add_argument(
        "--limit",
        type=int,
        default=RANK_HISTORY_LIMIT,
        help=f"Maximum rows to show (default: {RANK_HISTORY_LIMIT})",
    )
    history_list_parser.set_defaults(func=rank_history_list_command, uses_store=True)
    history_delete_parser = history_actions.add_parser("delete", help="Delete a stored rank check")
    history_delete_parser.add_argument("id", type=int, help="Rank check id (see 'rank-history list')")
    history_delete_parser.set_defaults(func=rank_history_delete_command, uses_store=True)

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return

    store = None
    try:
        if args.save or getattr(args, "uses_store", False):
            store = get_db_client()
        result, printer = args.func(args, store)
    except (PageFetchError, KeywordGapError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        if store is not None:
            store.close()

    if args.output == "json":
        output = _to_json(result)
        if args.output_file:
            with open(args.output_file, "w") as f:
                f.write(output)
            print(f"Results written to {args.output_file}")
        else:
            print(output)
    else:
        printer(result)


if __name__ == "__main__":
    main()
