import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resumeos.normalize.ai_response import (  # noqa: E402
    ParseError,
    extract_json_object,
    normalize_ai_response,
    normalize_bullet,
    resume_from_payload,
)
from resumeos.schemas.resume import Bullet  # noqa: E402


class ExtractJsonObjectTests(unittest.TestCase):
    def test_plain_object(self):
        self.assertEqual(extract_json_object('{"n": "Ada"}'), {"n": "Ada"})

    def test_fenced_object(self):
        self.assertEqual(extract_json_object('```json\n{"n": "Ada"}\n```'), {"n": "Ada"})
        self.assertEqual(extract_json_object('```JSON{"n": "Ada"}```'), {"n": "Ada"})

    def test_surrounding_prose_is_ignored(self):
        self.assertEqual(extract_json_object('Here you go: {"n": "Ada"} Good luck!'), {"n": "Ada"})

    def test_trailing_commas_are_repaired(self):
        raw = '{"n": "Ada", "sk": ["Python", "SQL",], "x": [],}'
        self.assertEqual(extract_json_object(raw), {"n": "Ada", "sk": ["Python", "SQL"], "x": []})

    def test_no_object_raises(self):
        with self.assertRaises(ParseError):
            extract_json_object("Sorry, I cannot help with that.")
        with self.assertRaises(ParseError):
            extract_json_object("")

    def test_unrepairable_json_raises(self):
        with self.assertRaises(ParseError):
            extract_json_object('{"n": "Ada" "e": "ada@example.com"}')


class NormalizeBulletTests(unittest.TestCase):
    def test_plain_string_is_authentic(self):
        self.assertEqual(normalize_bullet("Shipped v2"), Bullet(text="Shipped v2", authentic=True))

    def test_short_flag_marks_unverified(self):
        self.assertEqual(normalize_bullet({"tx": "Led X", "f": 1}), Bullet(text="Led X", authentic=False))
        self.assertEqual(normalize_bullet({"tx": "Led X", "f": 0}), Bullet(text="Led X", authentic=True))

    def test_long_form_authentic_flag(self):
        self.assertFalse(normalize_bullet({"text": "Y", "authentic": False}).authentic)
        self.assertTrue(normalize_bullet({"text": "Z"}).authentic)

    def test_text_key_decides_which_flag_is_read(self):
        self.assertEqual(normalize_bullet({"text": "Did", "f": 1}), Bullet(text="Did", authentic=True))
        self.assertEqual(normalize_bullet({"tx": "Did", "authentic": False}), Bullet(text="Did", authentic=True))

    def test_unknown_shapes_become_empty_bullets(self):
        self.assertEqual(normalize_bullet(42), Bullet())
        self.assertEqual(normalize_bullet(None), Bullet())


class NormalizeAiResponseTests(unittest.TestCase):
    def test_short_keys(self):
        resume = normalize_ai_response('{"n":"Ada","x":[{"c":"IBM","b":["Did a thing"]}]}')

        self.assertEqual(resume.name, "Ada")
        self.assertEqual(resume.email, "")
        self.assertEqual(resume.skills, [])
        self.assertEqual(resume.education, [])
        self.assertEqual(len(resume.experience), 1)
        entry = resume.experience[0]
        self.assertEqual(entry.company, "IBM")
        self.assertEqual(entry.title, "")
        self.assertEqual(entry.bullets, [Bullet(text="Did a thing", authentic=True)])

    def test_long_and_short_keys_are_equivalent(self):
        short = normalize_ai_response(
            '{"n":"Ada","e":"ada@example.com","sk":["Python"],'
            '"ed":[{"i":"MIT","dg":"BS","d":"2020"}]}'
        )
        long = normalize_ai_response(
            '{"name":"Ada","email":"ada@example.com","skills":["Python"],'
            '"education":[{"institution":"MIT","degree":"BS","dates":"2020"}]}'
        )
        self.assertEqual(short, long)

    def test_short_key_wins_unless_empty(self):
        self.assertEqual(resume_from_payload({"n": "Short", "name": "Long"}).name, "Short")
        self.assertEqual(resume_from_payload({"n": "", "name": "Long"}).name, "Long")

    def test_wrong_types_fall_back_to_defaults(self):
        resume = resume_from_payload({"x": "oops", "sk": "python", "ph": 5551234, "su": True})
        self.assertEqual(resume.experience, [])
        self.assertEqual(resume.skills, [])
        self.assertEqual(resume.phone, "5551234")
        self.assertEqual(resume.summary, "")

    def test_flagged_bullets_are_counted(self):
        resume = normalize_ai_response(
            '{"n":"Ada","x":[{"c":"IBM","b":["Did a thing",{"tx":"Led 40 people","f":1}]},'
            '{"c":"Acme","b":[{"text":"Cut costs","authentic":false}]}]}'
        )
        self.assertEqual(resume.flagged_bullet_count(), 2)
        self.assertEqual(len(resume.bullets()), 3)

    def test_unbalanced_braces_raise(self):
        with self.assertRaises(ParseError):
            normalize_ai_response("[1, 2] {")


if __name__ == "__main__":
    unittest.main()
