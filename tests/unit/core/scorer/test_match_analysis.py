"""Unit tests for parsing model output into MatchAnalysis."""
import json
import unittest

import pytest

from core.exceptions import MalformedOutputError
from core.scorer.models import BatchResult, MatchAnalysis, PostingDTO, parse_match_analysis
from tests.mocks.llm_mocks import make_analysis_payload


class TestParseMatchAnalysis(unittest.TestCase):

    def test_valid_payload(self):
        analysis = parse_match_analysis(json.dumps(make_analysis_payload(0.82)))

        self.assertEqual(analysis.match_score, 0.82)
        self.assertEqual(analysis.score_percent, 82)
        self.assertEqual(analysis.keywords_found, ["React", "TypeScript"])
        self.assertEqual(len(analysis.evidence), 1)
        self.assertEqual(analysis.evidence[0].skill, "React")

    def test_not_json_is_malformed(self):
        with self.assertRaises(MalformedOutputError):
            parse_match_analysis("Sure! Here is the analysis: ...")

    def test_non_object_is_malformed(self):
        with self.assertRaises(MalformedOutputError):
            parse_match_analysis("[0.5]")

    def test_missing_match_score_is_malformed(self):
        payload = make_analysis_payload()
        del payload["match_score"]
        with self.assertRaises(MalformedOutputError):
            parse_match_analysis(json.dumps(payload))

    def test_non_numeric_match_score_is_malformed(self):
        with self.assertRaises(MalformedOutputError):
            parse_match_analysis(json.dumps(make_analysis_payload("high")))

    def test_numeric_string_score_accepted(self):
        analysis = parse_match_analysis(json.dumps(make_analysis_payload("0.5")))
        self.assertEqual(analysis.match_score, 0.5)


class TestClamping:

    @pytest.mark.parametrize("raw, expected_score, expected_percent", [
        (1.4, 1.0, 100),
        (-0.2, 0.0, 0),
        (0.0, 0.0, 0),
        (1.0, 1.0, 100),
    ])
    def test_match_score_clamped(self, raw, expected_score, expected_percent):
        analysis = parse_match_analysis(json.dumps(make_analysis_payload(raw)))

        assert analysis.match_score == expected_score
        assert analysis.score_percent == expected_percent

    def test_breakdown_clamped_and_defaulted(self):
        payload = make_analysis_payload(score_breakdown={"skills_alignment": 3, "domain_fit": "bad"})
        analysis = parse_match_analysis(json.dumps(payload))

        assert analysis.score_breakdown.skills_alignment == 1.0
        assert analysis.score_breakdown.domain_fit == 0.0
        assert analysis.score_breakdown.experience_relevance == 0.0

    def test_non_list_arrays_become_empty(self):
        payload = make_analysis_payload(keywords_found="React", evidence={"skill": "React"})
        analysis = parse_match_analysis(json.dumps(payload))

        assert analysis.keywords_found == []
        assert analysis.evidence == []

    def test_bare_score_is_malformed(self):
        with pytest.raises(MalformedOutputError):
            parse_match_analysis('{"match_score": 0.9}')

    @pytest.mark.parametrize("key", [
        "keywords_found",
        "keywords_missing",
        "resume_warnings",
        "recommendations",
        "score_breakdown",
        "evidence",
    ])
    def test_missing_section_is_malformed(self, key):
        payload = make_analysis_payload(0.9)
        del payload[key]

        with pytest.raises(MalformedOutputError):
            parse_match_analysis(json.dumps(payload))


class TestScorePercentRounding:

    @pytest.mark.parametrize("score, expected", [
        (0.825, 83),
        (0.824, 82),
        (0.005, 1),
        (0.615, 62),
    ])
    def test_half_rounds_away_from_zero(self, score, expected):
        assert MatchAnalysis.model_validate(make_analysis_payload(score)).score_percent == expected


class TestBatchResult:

    def test_clean_run_is_200(self):
        result = BatchResult(request_id="r", processed_jobs=2, scored_analyses=2)
        assert result.status_code == 200
        assert result.success is True

    def test_partial_failure_is_207_and_still_successful(self):
        result = BatchResult(request_id="r", processed_jobs=3, scored_analyses=2, failed_jobs=1)
        assert result.status_code == 207
        assert result.success is True

    def test_total_failure_is_207_and_unsuccessful(self):
        result = BatchResult(request_id="r", processed_jobs=2, scored_analyses=0, failed_jobs=2)
        assert result.status_code == 207
        assert result.success is False

    def test_response_data_fields(self):
        data = BatchResult(request_id="r").to_response_data()
        assert set(data) == {
            'request_id', 'processed_jobs', 'scored_analyses',
            'failed_jobs', 'notifications_triggered', 'duration_ms',
        }


class TestPostingDTO:

    def test_display_name_with_company(self):
        posting = PostingDTO(id=1, source="s", source_url="u", title="Engineer", company_name="Acme", description_raw="")
        assert posting.display_name == "Engineer @ Acme"

    def test_display_name_without_company(self):
        posting = PostingDTO(id=1, source="s", source_url="u", title="Engineer", company_name=None, description_raw="")
        assert posting.display_name == "Engineer"
