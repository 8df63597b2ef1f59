import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumeos.taxonomy import get_default_skill_graph, load_skill_graph  # noqa: E402


class SkillGraphTests(unittest.TestCase):
    def test_default_graph_has_three_categories(self):
        graph = get_default_skill_graph()
        self.assertEqual(graph.categories, ("hard", "soft", "other"))
        self.assertIn("Python", graph.skills("hard"))
        self.assertIn("Communication", graph.skills("soft"))
        self.assertIn("Teams", graph.skills("other"))

    def test_synonyms_are_normalized_word_tuples(self):
        graph = get_default_skill_graph()
        self.assertEqual(graph.vocabulary("hard")["CI/CD"], (("ci", "cd"),))
        self.assertEqual(graph.vocabulary("hard")["Proof of Concept"], (("proof", "concept"),))
        self.assertEqual(graph.vocabulary("soft")["Attention to Detail"], (("attention", "detail"),))
        self.assertEqual(graph.vocabulary("other")["Teams"], (("team",), ("teams",)))

    def test_graph_is_read_only(self):
        vocabulary = get_default_skill_graph().vocabulary("hard")
        with self.assertRaises(TypeError):
            vocabulary["Cobol"] = (("cobol",),)

    def test_unknown_category_is_empty(self):
        self.assertEqual(dict(get_default_skill_graph().vocabulary("languages")), {})

    def test_load_rejects_malformed_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            not_mapping = Path(tmp) / "list.json"
            not_mapping.write_text(json.dumps(["python"]), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_skill_graph(not_mapping)

            bad_synonyms = Path(tmp) / "bad.json"
            bad_synonyms.write_text(json.dumps({"hard": {"Python": "python"}}), encoding="utf-8")
            with self.assertRaises(ValueError):
                load_skill_graph(bad_synonyms)

    def test_load_drops_empty_and_duplicate_phrases(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "graph.json"
            path.write_text(
                json.dumps({"hard": {"Go": ["Go", "go!", "the", "golang"]}}),
                encoding="utf-8",
            )
            graph = load_skill_graph(path)
        self.assertEqual(graph.vocabulary("hard")["Go"], (("go",), ("golang",)))


if __name__ == "__main__":
    unittest.main()
