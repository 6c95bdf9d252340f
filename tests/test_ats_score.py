import unittest

from careerhub.schemas.resume import ResumeRecord
from careerhub.scoring.ats_score import calculate_ats_score, score_rating, template_bonus


def _complete_resume(**overrides):
    data = {
        "personalInfo": {
            "fullName": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+1 555 010 2030",
            "location": "Berlin",
            "summary": "A" * 80,
        },
        "experience": [
            {
                "company": "Acme",
                "position": "Backend Engineer",
                "duration": "2021-2024",
                "description": "Built billing APIs in Python.",
            },
            {
                "company": "Globex",
                "position": "Software Engineer",
                "duration": "2018-2021",
                "description": "Maintained data pipelines.",
            },
        ],
        "education": [{"institution": "TU Berlin", "degree": "BSc Computer Science", "year": "2018"}],
        "skills": ["Python", "SQL", "Docker", "AWS", "FastAPI", "Kafka"],
    }
    data.update(overrides)
    return data


def _kinds(result):
    return [check.kind for check in result.checks]


class ATSScoreScenarioTests(unittest.TestCase):
    def test_empty_resume_scores_template_bonus_only(self):
        record = {
            "personalInfo": {"fullName": "", "email": "", "phone": "", "location": "", "summary": ""},
            "experience": [{"company": "", "position": "", "duration": "", "description": ""}],
            "education": [{"institution": "", "degree": "", "year": ""}],
            "skills": [],
        }

        result = calculate_ats_score(record, "classic-minimal")

        self.assertEqual(result.score, 10)
        self.assertEqual(result.template_bonus, 10)
        self.assertEqual(_kinds(result), ["fail", "warning", "fail", "fail", "fail", "info"])
        self.assertEqual(result.checks[-1].message, "Template ATS Score: 10/10")

    def test_complete_resume_with_modern_template(self):
        result = calculate_ats_score(_complete_resume(), "modern-professional")

        self.assertEqual(result.score, 98)
        self.assertEqual(_kinds(result), ["pass", "pass", "pass", "pass", "pass", "info"])
        self.assertEqual(result.checks[-1].message, "Template ATS Score: 8/10")

    def test_single_valid_experience_entry_scores_partial(self):
        data = _complete_resume()
        data["experience"] = [
            data["experience"][0],
            {"company": "Initech", "position": "Intern", "duration": "2017", "description": ""},
        ]

        result = calculate_ats_score(data, "modern-professional")

        self.assertEqual(result.score, 88)
        self.assertEqual(result.checks[2].kind, "warning")
        self.assertEqual(result.checks[2].message, "Add more work experience entries")

    def test_full_marks_with_classic_template(self):
        result = calculate_ats_score(_complete_resume(), "classic-minimal")
        self.assertEqual(result.score, 100)


class ATSScoreBoundaryTests(unittest.TestCase):
    def test_summary_of_fifty_characters_is_not_enough(self):
        data = _complete_resume()
        data["personalInfo"] = dict(data["personalInfo"], summary="S" * 50)

        result = calculate_ats_score(data, "modern-professional")

        self.assertEqual(result.checks[1].kind, "warning")
        self.assertEqual(result.checks[1].message, "Add a professional summary (50+ characters)")
        self.assertEqual(result.score, 98 - 15)

    def test_summary_of_fifty_one_characters_passes(self):
        data = _complete_resume()
        data["personalInfo"] = dict(data["personalInfo"], summary="S" * 51)

        result = calculate_ats_score(data, "modern-professional")

        self.assertEqual(result.checks[1].kind, "pass")
        self.assertEqual(result.score, 98)

    def test_skills_thresholds(self):
        cases = [
            (["Python", "SQL", "Docker", "AWS", "Go"], "pass", 15),
            (["Python", "SQL", "Docker", "AWS"], "warning", 10),
            (["Python", "SQL", "Docker"], "warning", 10),
            (["Python", "SQL"], "fail", 0),
            (["", "SQL", "Docker", "AWS", "Go", "Rust"], "fail", 0),
        ]
        baseline = calculate_ats_score(_complete_resume(skills=[]), "modern-professional").score
        for skills, kind, points in cases:
            with self.subTest(skills=skills):
                result = calculate_ats_score(_complete_resume(skills=skills), "modern-professional")
                self.assertEqual(result.checks[4].kind, kind)
                self.assertEqual(result.score, baseline + points)

    def test_contact_requires_all_three_fields(self):
        data = _complete_resume()
        data["personalInfo"] = dict(data["personalInfo"], phone="")

        result = calculate_ats_score(data, "modern-professional")

        self.assertEqual(result.checks[0].kind, "fail")
        self.assertEqual(result.checks[0].message, "Missing contact information")
        self.assertEqual(result.score, 78)

    def test_education_requires_institution_and_degree(self):
        result = calculate_ats_score(
            _complete_resume(education=[{"institution": "MIT", "degree": "", "year": "2010"}]),
            "modern-professional",
        )
        self.assertEqual(result.checks[3].kind, "fail")
        self.assertEqual(result.checks[3].message, "Missing education information")


class ATSScorePropertyTests(unittest.TestCase):
    def test_unknown_template_uses_default_bonus(self):
        self.assertEqual(template_bonus("custom-xyz"), 6)
        self.assertEqual(template_bonus(None), 6)
        result = calculate_ats_score({}, "custom-xyz")
        self.assertEqual(result.template_bonus, 6)
        self.assertEqual(result.score, 6)

    def test_scoring_is_idempotent(self):
        record = ResumeRecord.model_validate(_complete_resume())
        first = calculate_ats_score(record, "tech-specialist")
        second = calculate_ats_score(record, "tech-specialist")
        self.assertEqual(first, second)
        self.assertEqual(first.model_dump(), second.model_dump())

    def test_filling_missing_field_never_lowers_score(self):
        data = _complete_resume()
        data["personalInfo"] = dict(data["personalInfo"], phone="")
        before = calculate_ats_score(data, "tech-specialist").score

        data["personalInfo"] = dict(data["personalInfo"], phone="+1 555 000 1111")
        after = calculate_ats_score(data, "tech-specialist").score

        self.assertGreaterEqual(after, before)
        self.assertEqual(after - before, 20)

    def test_malformed_input_never_raises(self):
        inputs = [
            None,
            "not a resume",
            [],
            {"personalInfo": None, "experience": None, "education": "x", "skills": None},
            {"personal_info": {"full_name": 42, "email": None}, "experience": ["junk", 7], "skills": [None, 3]},
        ]
        for payload in inputs:
            with self.subTest(payload=payload):
                result = calculate_ats_score(payload, "classic-minimal")
                self.assertTrue(0 <= result.score <= 100)
                self.assertEqual(len(result.checks), 6)

    def test_accepts_snake_case_payloads(self):
        data = {
            "personal_info": {"full_name": "Jane", "email": "jane@example.com", "phone": "123"},
            "skills": ["Python", "SQL", "Docker"],
        }
        result = calculate_ats_score(data, "modern-professional")
        self.assertEqual(result.checks[0].kind, "pass")
        self.assertEqual(result.score, 20 + 10 + 8)

    def test_falsy_scalars_count_as_blank(self):
        data = {
            "personalInfo": {"fullName": 0, "email": "jane@example.com", "phone": "555"},
            "skills": [False, "SQL", "Docker", "AWS", "Go"],
        }
        result = calculate_ats_score(data, "classic-minimal")
        self.assertEqual(result.checks[0].kind, "fail")
        self.assertEqual(result.checks[4].kind, "fail")

        data["personalInfo"]["fullName"] = float("nan")
        self.assertEqual(calculate_ats_score(data, "classic-minimal").checks[0].kind, "fail")

        data["personalInfo"]["fullName"] = 7
        self.assertEqual(calculate_ats_score(data, "classic-minimal").checks[0].kind, "pass")

    def test_scoring_does_not_mutate_input(self):
        data = _complete_resume()
        snapshot = repr(data)
        calculate_ats_score(data, "classic-minimal")
        self.assertEqual(repr(data), snapshot)


class ScoreRatingTests(unittest.TestCase):
    def test_thresholds_are_inclusive(self):
        self.assertEqual(score_rating(100).label, "Excellent")
        self.assertEqual(score_rating(80).label, "Excellent")
        self.assertEqual(score_rating(80).color, "green")
        self.assertEqual(score_rating(79).label, "Good")
        self.assertEqual(score_rating(60).label, "Good")
        self.assertEqual(score_rating(60).color, "yellow")
        self.assertEqual(score_rating(59).label, "Needs Improvement")
        self.assertEqual(score_rating(0).color, "red")


if __name__ == "__main__":
    unittest.main()
