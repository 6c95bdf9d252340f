import unittest

from careerhub.core.tools_config import get_tools_config, get_tools_value


class ToolsConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_tools_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_tools_value("fallbacks.keyword_scan.match_score"), 70)
        self.assertEqual(get_tools_value("search.jobs.results_per_page"), 20)

    def test_missing_path_returns_default(self):
        self.assertEqual(get_tools_value("fallbacks.unknown.key", "default"), "default")
        self.assertEqual(get_tools_value("fallbacks.keyword_scan.match_score.deeper", 0), 0)
        self.assertIsNone(get_tools_value(""))


if __name__ == "__main__":
    unittest.main()
