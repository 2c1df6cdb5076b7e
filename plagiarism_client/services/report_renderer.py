from typing import List

from plagiarism_client.services.presentation import ReportView, Severity, Tone

ANSI = {
    "red": "\033[31m",
    "orange": "\033[33m",
    "green": "\033[32m",
    "bold": "\033[1m",
    "reset": "\033[0m",
}

SEVERITY_TAGS = {
    Severity.HIGH: ("[HIGH]", "red"),
    Severity.MEDIUM: ("[MED]", "orange"),
    Severity.LOW: ("[LOW]", "green"),
}

BAR_WIDTH = 40


def render_report(view: ReportView, color: bool = False) -> str:
    """
    Renders a loaded report as plain text: headline score and verdict,
    the Unique/Plagiarized split, writing metrics and the sentence analysis.
    """
    def paint(text: str, name: str) -> str:
        if not color:
            return text
        return f"{ANSI[name]}{text}{ANSI['reset']}"

    lines: List[str] = []
    lines.append(paint("Plagiarism Detection Report", "bold"))
    lines.append(f"Report ID: {view.task_id}")
    lines.append("")

    headline_color = "red" if view.headline_tone == Tone.ADVERSE else "green"
    lines.append(f"Overall Plagiarism Score: {paint(f'{view.overall_similarity:g}%', headline_color)}")
    lines.append(f"Verdict: {view.verdict.value}")
    if view.explanation:
        lines.append(f"Explanation: {view.explanation}")
    lines.append(_render_chart(view))
    lines.append("")

    # Metrics
    metrics = view.metrics
    lines.append(paint("Writing Metrics:", "bold"))
    lines.append(f"  Grammar Issues: {metrics.grammar_issues}")
    lines.append(f"  Spelling: {metrics.spelling_errors}")
    lines.append(f"  Readability: {metrics.readability_label} (Score: {metrics.readability_score:g})")
    lines.append(f"  Conciseness: {metrics.additional_issues} long sentences")
    lines.append("")

    # Detailed Analysis
    lines.append(paint("Sentence Analysis:", "bold"))
    for row in view.rows:
        tag, tag_color = SEVERITY_TAGS[row.severity]
        lines.append(paint(f"{tag} Similarity: {row.score_label}", tag_color))
        lines.append(f"  Sentence: {row.sentence}")
        if row.matched_source:
            lines.append(f"  Matches: \"{row.matched_source}\"")
        if row.explanation:
            lines.append(f"  {row.explanation}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"


def _render_chart(view: ReportView) -> str:
    unique, plagiarized = view.chart.values
    filled = round(BAR_WIDTH * plagiarized / 100)
    bar = "#" * filled + "-" * (BAR_WIDTH - filled)
    return (
        f"[{bar}] {view.chart.labels[0]}: {unique:g}%  "
        f"{view.chart.labels[1]}: {plagiarized:g}%"
    )
