# nricheck/reporting.py
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List

from jinja2 import Template

from .engine.types import EngineOutput, Severity
from .logging_config import log_event
from .settings import get_settings

settings = get_settings()


@dataclass(frozen=True)
class ReportMessage:
    to: str
    sender: str
    subject: str
    body: str
    html: str
    attachment_name: str
    score: int
    penalty_max: int
    counts: Dict[str, int] = field(default_factory=dict)
    message_id: str = field(default_factory=lambda: str(uuid.uuid4()))


HTML_TEMPLATE = Template(
    r"""
<!doctype html>
<html>
<body style="font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif; color: #1f2933;">
  <h1 style="font-size: 22px;">Your NRI Compliance Report</h1>
  <p style="font-size: 40px; font-weight: 700; margin: 8px 0;">{{ score }}<span style="font-size: 18px; color: #6b7280;">/100</span></p>
  <table style="border-collapse: collapse; font-size: 14px;">
    <tr><td style="padding: 4px 12px 4px 0; color: #991b1b;">Urgent</td><td>{{ counts.urgent }}</td></tr>
    <tr><td style="padding: 4px 12px 4px 0; color: #92400e;">Warning</td><td>{{ counts.warning }}</td></tr>
    <tr><td style="padding: 4px 12px 4px 0; color: #075985;">Info</td><td>{{ counts.info }}</td></tr>
  </table>
  {% if penalty_max %}
  <p>Estimated penalty exposure: up to <strong>${{ "{:,}".format(penalty_max) }}</strong></p>
  {% endif %}
  {% if findings %}
  <ul>
    {% for f in findings %}
    <li><strong>[{{ f.severity.value | upper }}]</strong> {{ f.rule_name }}</li>
    {% endfor %}
  </ul>
  {% else %}
  <p>No compliance gaps found.</p>
  {% endif %}
  <p style="font-size: 12px; color: #6b7280;">Your full report is attached as {{ attachment_name }}.</p>
</body>
</html>
""",
    autoescape=True,
)


def severity_counts(output: EngineOutput) -> Dict[str, int]:
    counts = {s.value: 0 for s in Severity}
    for finding in output.results:
        counts[finding.severity.value] += 1
    return counts


def build_report_message(email: str, output: EngineOutput) -> ReportMessage:
    """Summary handed to the mailer. Score and totals come from ``output`` only."""
    counts = severity_counts(output)

    lines: List[str] = [
        f"Your NRI compliance score: {output.score}/100",
        f"Urgent: {counts['urgent']} | Warning: {counts['warning']} | Info: {counts['info']}",
        f"Estimated penalty exposure: up to ${output.total_penalty_max:,}",
        "",
    ]
    for finding in output.results:
        lines.append(f"[{finding.severity.value.upper()}] {finding.rule_name}")

    html = HTML_TEMPLATE.render(
        score=output.score,
        counts=counts,
        penalty_max=output.total_penalty_max,
        findings=output.results,
        attachment_name=settings.REPORT_ATTACHMENT_NAME,
    )

    return ReportMessage(
        to=email,
        sender=settings.REPORT_FROM_EMAIL,
        subject=f"Your NRI Compliance Report (Score: {output.score}/100)",
        body="\n".join(lines),
        html=html,
        attachment_name=settings.REPORT_ATTACHMENT_NAME,
        score=output.score,
        penalty_max=output.total_penalty_max,
        counts=counts,
    )


class DeliveryError(RuntimeError):
    pass


class Mailer(ABC):
    """Delivery seam. Transport is provided by the deployment; raise DeliveryError on failure."""

    @abstractmethod
    def send(self, message: ReportMessage) -> None:
        ...


class LogMailer(Mailer):
    def send(self, message: ReportMessage) -> None:
        log_event("SEND_REPORT", message.subject, {
            "message_id": message.message_id,
            "attachment": message.attachment_name,
        })


def get_mailer() -> Mailer:
    return LogMailer()
