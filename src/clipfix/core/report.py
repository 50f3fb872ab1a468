from clipfix.models import AggregateReport, FixRun

CONTENT_REF_TYPE = "local::{resourceId}.{contentId}"


def render_operation(report: AggregateReport, type_str: str) -> str | None:
    """Summarize one operation, or return ``None`` when it found nothing at all."""
    if report.is_empty:
        return None
    text = f"fixed {report.fixed} matches of {type_str}."
    if report.unresolved:
        listing = "\n\n".join(f"{match.location}\n{match.line}" for match in report.unresolved)
        text += f"\nWasn't able to change these matches:\n{listing}"
    return text


def render_summary(run: FixRun, target_call: str = "AudioClip.play") -> str:
    content_text = render_operation(run.content, CONTENT_REF_TYPE)
    audio_text = render_operation(run.audio, target_call) or f"found no {target_call.split('.')[0]} to fix automatically."

    if content_text:
        summary = f"First, {content_text}\nThen successfully {audio_text}"
    else:
        summary = f"Successfully {audio_text}"

    dropped = sorted(set(run.content.dropped_resource_ids))
    if dropped:
        summary += f"\nResource ids dropped from content references: {', '.join(dropped)}"
    return summary
