import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from careerhub.main import app
from careerhub.schemas.resume import ResumeRecord
from careerhub.schemas.tools import (
    KeywordScanRequest,
    LinkedInOptimizeRequest,
    ResumeComparisonRequest,
    ResumeOptimizeRequest,
    SkillsGapRequest,
)
from careerhub.services import career_tools
from careerhub.services.tools_llm import ToolsLLMError, parse_json_object


class ParseJsonObjectTests(unittest.TestCase):
    def test_parses_plain_json(self):
        self.assertEqual(parse_json_object('{"a": 1}'), {"a": 1})

    def test_extracts_object_wrapped_in_prose(self):
        content = 'Here is the analysis:\n```json\n{"matchScore": 82}\n```\nGood luck!'
        self.assertEqual(parse_json_object(content), {"matchScore": 82})

    def test_rejects_non_objects(self):
        self.assertIsNone(parse_json_object("[1, 2]"))
        self.assertIsNone(parse_json_object("no json here"))
        self.assertIsNone(parse_json_object(""))
        self.assertIsNone(parse_json_object(None))


class CareerToolsFallbackTests(unittest.TestCase):
    def test_keyword_scan_falls_back_when_llm_disabled(self):
        result = career_tools.scan_keywords(
            KeywordScanRequest(resume_text="Python developer", job_description="Need Python and AWS")
        )
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.match_score, 70)
        self.assertEqual(result.missing_keywords, ["Python", "AWS", "Docker"])
        self.assertEqual(len(result.suggestions), 3)

    def test_resume_comparison_fallback(self):
        result = career_tools.compare_resumes(ResumeComparisonRequest(resume1="One", resume2="Two"))
        self.assertEqual(result.source, "fallback")
        self.assertEqual((result.resume1_score, result.resume2_score), (75, 82))
        self.assertTrue(result.recommendation.startswith("Resume 2 is better aligned"))

    def test_resume_optimizer_fallback_returns_original_resume(self):
        resume = ResumeRecord.model_validate(
            {"personalInfo": {"fullName": "Jane", "summary": "Short"}, "skills": ["Python"]}
        )
        result = career_tools.optimize_resume(ResumeOptimizeRequest(resume=resume, template_id="classic-minimal"))
        self.assertEqual(result.source, "fallback")
        self.assertEqual(result.optimized_resume, resume)
        self.assertEqual(result.score_before, result.score_after)
        self.assertEqual(result.suggestions, ["Unable to generate AI suggestions. Please try again."])

    def test_strict_mode_raises_instead_of_falling_back(self):
        with patch.dict(os.environ, {"TOOLS_STRICT_LLM": "1"}):
            with self.assertRaises(ToolsLLMError):
                career_tools.optimize_linkedin(LinkedInOptimizeRequest(linkedin_profile="Engineer at Acme"))


class CareerToolsAIResponseTests(unittest.TestCase):
    def test_keyword_scan_sanitises_model_output(self):
        payload = {
            "matchScore": "140",
            "foundKeywords": ["Python", "", 7, "  SQL  "],
            "missingKeywords": ["Kubernetes"],
            "suggestions": ["Mention Kubernetes in your latest role"],
        }
        with patch.object(career_tools, "json_completion", return_value=payload):
            result = career_tools.scan_keywords(
                KeywordScanRequest(resume_text="Python SQL", job_description="Python SQL Kubernetes")
            )
        self.assertEqual(result.source, "ai")
        self.assertEqual(result.match_score, 100)
        self.assertEqual(result.found_keywords, ["Python", "SQL"])
        self.assertEqual(result.missing_keywords, ["Kubernetes"])

    def test_unexpected_schema_uses_fallback(self):
        with patch.object(career_tools, "json_completion", return_value={"unrelated": True}):
            result = career_tools.scan_keywords(KeywordScanRequest(resume_text="a", job_description="b"))
        self.assertEqual(result.source, "fallback")

    def test_skills_gap_normalises_nested_items(self):
        payload = {
            "match_score": 55,
            "matched_skills": ["Python"],
            "gap_analysis": [
                {
                    "skill": "Kubernetes",
                    "importance": "CRITICAL",
                    "currentLevel": 10,
                    "requiredLevel": 80,
                    "resources": [{"title": "K8s Basics", "platform": "Coursera", "url": "https://example.com"}],
                },
                {"skill": "Terraform", "importance": "someday"},
                {"importance": "critical"},
                "junk",
            ],
            "learning_path": [{"phase": "Phase 1", "duration": "4 weeks", "skills": ["Kubernetes"]}],
            "career_tips": ["Ship a side project"],
        }
        with patch.object(career_tools, "json_completion", return_value=payload):
            result = career_tools.analyze_skills_gap(
                SkillsGapRequest(resume_skills="Python", job_description="Python, Kubernetes", target_role="SRE")
            )
        self.assertEqual(result.source, "ai")
        self.assertEqual([gap.skill for gap in result.gap_analysis], ["Kubernetes", "Terraform"])
        self.assertEqual(result.gap_analysis[0].importance, "critical")
        self.assertEqual(result.gap_analysis[0].required_level, 80)
        self.assertEqual(result.gap_analysis[1].importance, "important")
        self.assertEqual(result.gap_analysis[0].resources[0].platform, "Coursera")
        self.assertEqual(result.learning_path[0].phase, "Phase 1")

    def test_linkedin_sections_default_unknown_status(self):
        payload = {
            "overallScore": 72,
            "sections": [{"name": "Headline", "score": 60, "status": "meh", "suggestions": ["Add role"]}],
            "keywordMatch": {"matched": ["Python"], "missing": ["Go"]},
            "generalTips": ["Post weekly"],
        }
        with patch.object(career_tools, "json_completion", return_value=payload):
            result = career_tools.optimize_linkedin(LinkedInOptimizeRequest(linkedin_profile="Engineer"))
        self.assertEqual(result.overall_score, 72)
        self.assertEqual(result.sections[0].status, "needs-work")
        self.assertEqual(result.keyword_match.missing, ["Go"])

    def test_resume_optimizer_applies_ai_rewrites_and_rescores(self):
        resume = ResumeRecord.model_validate(
            {
                "personalInfo": {"fullName": "Jane", "email": "j@example.com", "phone": "1", "summary": "Engineer"},
                "experience": [
                    {"company": "Acme", "position": "Engineer", "duration": "2020-2024", "description": "APIs"}
                ],
                "skills": ["Python", "SQL", "Docker", "AWS", "Go"],
            }
        )
        payload = {
            "optimizedSummary": "Backend engineer who designs reliable APIs and cut infrastructure costs by 30 percent.",
            "optimizedExperience": [{"description": "Designed and shipped 12 public APIs used by 40k customers."}],
            "suggestions": ["Add an education entry"],
        }
        with patch.object(career_tools, "json_completion", return_value=payload):
            result = career_tools.optimize_resume(ResumeOptimizeRequest(resume=resume, template_id="tech-specialist"))

        optimized = result.optimized_resume
        self.assertEqual(result.source, "ai")
        self.assertTrue(optimized.personal_info.summary.startswith("Backend engineer"))
        self.assertEqual(optimized.experience[0].company, "Acme")
        self.assertTrue(optimized.experience[0].description.startswith("Designed and shipped"))
        self.assertEqual(result.score_after.score - result.score_before.score, 15)
        self.assertEqual(resume.personal_info.summary, "Engineer")


class CareerToolsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_keyword_scan_endpoint_returns_fallback(self):
        response = self.client.post(
            "/v1/tools/keyword-scan",
            json={"resume_text": "Python developer", "job_description": "Python and AWS"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["source"], "fallback")
        self.assertIn("generatedAt", body)

    def test_empty_resume_text_is_rejected(self):
        response = self.client.post("/v1/tools/keyword-scan", json={"resume_text": "", "job_description": "x"})
        self.assertEqual(response.status_code, 422)

    def test_strict_mode_returns_503(self):
        with patch.dict(os.environ, {"TOOLS_STRICT_LLM": "1"}):
            response = self.client.post(
                "/v1/tools/skills-gap",
                json={"resume_skills": "Python", "job_description": "Go"},
            )
        self.assertEqual(response.status_code, 503)

    def test_resume_optimizer_serialises_camel_case_resume(self):
        response = self.client.post(
            "/v1/tools/resume-optimizer",
            json={"resume": {"personalInfo": {"fullName": "Jane"}, "skills": []}, "template_id": "classic-minimal"},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["optimizedResume"]["personalInfo"]["fullName"], "Jane")
        self.assertEqual(body["scoreBefore"]["score"], 10)

    def test_api_key_is_enforced_when_configured(self):
        from dataclasses import replace

        from careerhub.core import security

        with patch.object(security, "settings", replace(security.settings, api_key="secret-key")):
            denied = self.client.post(
                "/v1/tools/resume-comparison",
                json={"resume1": "One", "resume2": "Two"},
            )
            allowed = self.client.post(
                "/v1/tools/resume-comparison",
                json={"resume1": "One", "resume2": "Two"},
                headers={"X-API-Key": "secret-key"},
            )
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)


if __name__ == "__main__":
    unittest.main()
