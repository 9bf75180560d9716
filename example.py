"""Example usage of the SEO toolkit - Single page audit and keyword check."""

from seotoolkit import SEOAuditor, PageFetchError


def main():
    """Run example SEO audit."""

    auditor = SEOAuditor()

    url = "https://example.com"
    print(f"Auditing {url}...")

    try:
        report = auditor.audit(url)
    except PageFetchError as e:
        print(f"Failed to fetch: {e}")
        return

    print(f"\nOverall Score: {report.score.overall}/100")
    for category, score in report.score.categories.items():
        print(f"{category.replace('_', ' ').title()} Score: {score}/100")

    print("\nIssues:")
    for issue in report.issues:
        print(f"  • [{issue.severity.value}] {issue.message}")

    check = auditor.check_on_page(url, "example domain")
    print(f"\nOn-page score for '{check.keyword}': {check.seo_score}/100")
    for suggestion in check.suggestions:
        print(f"  • {suggestion}")


if __name__ == "__main__":
    main()
