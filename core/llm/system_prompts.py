SCORING_SYSTEM_PROMPT = (
    "You are a deterministic ATS evaluator. Return JSON matching schema exactly. "
    "Never invent candidate evidence."
)

RETRY_HINT = (
    "\n\nIMPORTANT: Your previous response was invalid. Return strict JSON that exactly "
    "matches the required schema keys and value types."
)

SCORING_USER_PROMPT_TEMPLATE = """
Task: Compare candidate baseline against job description using deterministic ATS rubric.

Scoring rubric (0.0-1.0):
- skills_alignment (40%)
- experience_relevance (30%)
- domain_fit (20%)
- format_quality (10%)

Output constraints:
- Return JSON matching schema.
- Use evidence-grounded findings only.
- Include concise evidence quotes.

Job:
- title: {job_title}
- content:
{job_text}

Candidate baseline profile:
{baseline_text}
"""


def build_scoring_prompt(job_title: str, job_text: str, baseline_text: str) -> str:
    return SCORING_USER_PROMPT_TEMPLATE.format(
        job_title=job_title,
        job_text=job_text,
        baseline_text=baseline_text,
    ).strip()
