"""
Strict JSON schema for ATS match scoring output.

Wrapped as {'name', 'strict', 'schema'} so the name travels with the schema.
"""

_UNIT_INTERVAL = {"type": "number", "minimum": 0, "maximum": 1}
_STRING_LIST = {"type": "array", "items": {"type": "string"}}

ATS_ANALYSIS_SCHEMA = {
    "name": "ats_analysis",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "required": [
            "match_score",
            "keywords_found",
            "keywords_missing",
            "resume_warnings",
            "recommendations",
            "score_breakdown",
            "evidence",
        ],
        "properties": {
            "match_score": _UNIT_INTERVAL,
            "keywords_found": _STRING_LIST,
            "keywords_missing": _STRING_LIST,
            "resume_warnings": _STRING_LIST,
            "recommendations": _STRING_LIST,
            "score_breakdown": {
                "type": "object",
                "additionalProperties": False,
                "required": ["skills_alignment", "experience_relevance", "domain_fit", "format_quality"],
                "properties": {
                    "skills_alignment": _UNIT_INTERVAL,
                    "experience_relevance": _UNIT_INTERVAL,
                    "domain_fit": _UNIT_INTERVAL,
                    "format_quality": _UNIT_INTERVAL,
                },
            },
            "evidence": {
                "type": "array",
                "items": {
                    "type": "object",
                    "additionalProperties": False,
                    "required": ["skill", "jd_quote", "resume_quote", "reasoning"],
                    "properties": {
                        "skill": {"type": "string"},
                        "jd_quote": {"type": "string"},
                        "resume_quote": {"type": "string"},
                        "reasoning": {"type": "string"},
                    },
                },
            },
        },
    },
}
