from typing import Any

from version_checkr.versioning import ComparisonResult

NO_PULL_REQUEST_SUMMARY = "Commit is not part of a pull request, so version was not checked"


def check_run_conclusion(result: ComparisonResult) -> str:
    return "success" if result.is_satisfied else "failure"


def format_comparison_output(result: ComparisonResult, manifest_path: str) -> dict[str, Any]:
    """Format a version comparison for check run output."""
    if result.skipped:
        return {
            "title": "Skipped",
            "summary": result.message,
            "text": "The pull request description asked for the version check to be skipped.",
        }

    if result.is_satisfied:
        return {"title": "Success", "summary": result.message, "annotations": []}

    return {
        "title": "Failure",
        "summary": result.message,
        "annotations": [
            {
                "path": manifest_path,
                "start_line": result.line_number,
                "end_line": result.line_number,
                "annotation_level": "failure",
                "message": result.message,
            }
        ],
    }


def format_no_pull_request_output() -> dict[str, Any]:
    return {"title": "No PR to check", "summary": NO_PULL_REQUEST_SUMMARY}
